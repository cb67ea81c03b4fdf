from enum import StrEnum


class EventStatus(StrEnum):
    """Monotonic: upcoming → live → completed, any non-terminal → cancelled"""

    UPCOMING = 'upcoming'
    LIVE = 'live'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
