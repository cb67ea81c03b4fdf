from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import ConflictError, DomainError
from src.service.ticketing.domain.enum.guest_list_status import (
    PRE_CHECK_IN_STATUSES,
    GuestListStatus,
)
from src.service.ticketing.domain.enum.rejection_reason import GuestCheckInRejectReason


MAX_PLUS_ONES = 10


def _validate_plus_ones(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if not 0 <= value <= MAX_PLUS_ONES:
        raise DomainError(f'plus_ones must be between 0 and {MAX_PLUS_ONES}')


@attrs.define
class GuestListEntry:
    venue_id: int
    added_by: int
    event_id: Optional[int] = None
    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    plus_ones: int = attrs.field(default=0, validator=_validate_plus_ones)
    is_vip: bool = False
    notes: Optional[str] = None
    status: GuestListStatus = GuestListStatus.PENDING
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        venue_id: int,
        added_by: int,
        event_id: Optional[int] = None,
        user_id: Optional[int] = None,
        guest_name: Optional[str] = None,
        guest_email: Optional[str] = None,
        guest_phone: Optional[str] = None,
        plus_ones: int = 0,
        is_vip: bool = False,
        notes: Optional[str] = None,
    ) -> 'GuestListEntry':
        guest_name = guest_name.strip() if guest_name else None
        if user_id is None and not guest_name:
            raise DomainError('Guest needs a registered user or a name')
        return cls(
            venue_id=venue_id,
            added_by=added_by,
            event_id=event_id,
            user_id=user_id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
            plus_ones=plus_ones,
            is_vip=is_vip,
            notes=notes,
        )

    @property
    def party_size(self) -> int:
        return 1 + self.plus_ones

    def confirm(self) -> 'GuestListEntry':
        if self.status != GuestListStatus.PENDING:
            raise ConflictError(f'Only pending guests can be confirmed (currently {self.status})')
        return attrs.evolve(self, status=GuestListStatus.CONFIRMED)

    def remove(self) -> 'GuestListEntry':
        if self.status not in PRE_CHECK_IN_STATUSES:
            raise ConflictError(f'Guest can no longer be removed (currently {self.status})')
        return attrs.evolve(self, status=GuestListStatus.REMOVED)

    def check_in_rejection(self) -> Optional[GuestCheckInRejectReason]:
        match self.status:
            case GuestListStatus.CHECKED_IN:
                return GuestCheckInRejectReason.ALREADY_CHECKED_IN
            case GuestListStatus.REMOVED:
                return GuestCheckInRejectReason.REMOVED
            case GuestListStatus.NO_SHOW:
                return GuestCheckInRejectReason.NO_SHOW
        return None
