from datetime import datetime, timedelta
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.ticketing.domain.enum.event_status import EventStatus


_ALLOWED_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.UPCOMING: frozenset({EventStatus.LIVE, EventStatus.CANCELLED}),
    EventStatus.LIVE: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise DomainError(f'Event {attribute.name} cannot be empty')


@attrs.define
class Event:
    venue_id: int
    name: str = attrs.field(validator=_validate_non_empty_string)
    starts_at: datetime
    ends_at: datetime
    created_by: int
    status: EventStatus = EventStatus.UPCOMING
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        venue_id: int,
        name: str,
        starts_at: datetime,
        ends_at: datetime,
        created_by: int,
    ) -> 'Event':
        if ends_at <= starts_at:
            raise DomainError('Event must end after it starts')
        return cls(
            venue_id=venue_id,
            name=name,
            starts_at=starts_at,
            ends_at=ends_at,
            created_by=created_by,
        )

    def can_transition_to(self, new_status: EventStatus) -> bool:
        return new_status in _ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: EventStatus) -> 'Event':
        if not self.can_transition_to(new_status):
            raise DomainError(f'Event cannot move from {self.status} to {new_status}')
        return attrs.evolve(self, status=new_status)

    def is_accepting_check_ins(self, *, now: datetime, early_entry: timedelta) -> bool:
        """LIVE always admits; an UPCOMING event opens its doors ``early_entry`` before start."""
        if self.status == EventStatus.LIVE:
            return True
        if self.status == EventStatus.UPCOMING:
            return self.starts_at - early_entry <= now <= self.ends_at
        return False

    def has_ended(self, *, now: datetime) -> bool:
        if self.status == EventStatus.COMPLETED:
            return True
        if self.status == EventStatus.CANCELLED:
            return False
        return now >= self.ends_at
