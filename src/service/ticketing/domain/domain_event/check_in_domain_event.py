"""
Check-in Domain Events

Published on the venue channel after the redemption transaction commits.
"""

from datetime import datetime
from typing import Any, ClassVar, Optional

import attrs

from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord


def _serialize(inst: type, field: attrs.Attribute, value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


@attrs.define(frozen=True)
class TicketCheckedInEvent:
    event_type: ClassVar[str] = 'ticket_checked_in'

    venue_id: int
    event_id: Optional[int]
    ticket_id: int
    staff_id: int
    checked_in_at: datetime

    @classmethod
    def from_record(cls, *, record: CheckInRecord) -> 'TicketCheckedInEvent':
        assert record.ticket_id is not None
        return cls(
            venue_id=record.venue_id,
            event_id=record.event_id,
            ticket_id=record.ticket_id,
            staff_id=record.staff_id,
            checked_in_at=record.checked_in_at,
        )

    def to_dict(self) -> dict:
        return {'event_type': self.event_type, **attrs.asdict(self, value_serializer=_serialize)}


@attrs.define(frozen=True)
class GuestCheckedInEvent:
    event_type: ClassVar[str] = 'guest_checked_in'

    venue_id: int
    event_id: Optional[int]
    guest_list_entry_id: int
    guest_name: Optional[str]
    party_size: int
    is_vip: bool
    staff_id: int
    checked_in_at: datetime

    def to_dict(self) -> dict:
        return {'event_type': self.event_type, **attrs.asdict(self, value_serializer=_serialize)}
