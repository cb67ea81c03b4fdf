from enum import StrEnum


class GuestListStatus(StrEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CHECKED_IN = 'checked_in'
    NO_SHOW = 'no_show'
    REMOVED = 'removed'


# States from which a guest can still walk in (or be removed)
PRE_CHECK_IN_STATUSES = frozenset({GuestListStatus.PENDING, GuestListStatus.CONFIRMED})
