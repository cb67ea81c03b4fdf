from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.ticketing.domain.enum.check_in_method import CheckInMethod


@attrs.define(frozen=True)
class CheckInRecord:
    """Append-only; references exactly one of a ticket or a guest list entry."""

    venue_id: int
    method: CheckInMethod
    staff_id: int
    checked_in_at: datetime
    event_id: Optional[int] = None
    ticket_id: Optional[int] = None
    guest_list_entry_id: Optional[int] = None
    id: Optional[int] = None

    def __attrs_post_init__(self) -> None:
        if (self.ticket_id is None) == (self.guest_list_entry_id is None):
            raise DomainError('Check-in must reference exactly one of ticket or guest list entry')

    @classmethod
    def for_ticket(
        cls,
        *,
        ticket_id: int,
        venue_id: int,
        event_id: int,
        staff_id: int,
        now: datetime,
        method: CheckInMethod = CheckInMethod.QR_CODE,
    ) -> 'CheckInRecord':
        if method == CheckInMethod.GUEST_LIST:
            raise DomainError('Ticket check-in cannot use the guest list method')
        return cls(
            venue_id=venue_id,
            event_id=event_id,
            ticket_id=ticket_id,
            method=method,
            staff_id=staff_id,
            checked_in_at=now,
        )

    @classmethod
    def for_guest(
        cls,
        *,
        guest_list_entry_id: int,
        venue_id: int,
        event_id: Optional[int],
        staff_id: int,
        now: datetime,
    ) -> 'CheckInRecord':
        return cls(
            venue_id=venue_id,
            event_id=event_id,
            guest_list_entry_id=guest_list_entry_id,
            method=CheckInMethod.GUEST_LIST,
            staff_id=staff_id,
            checked_in_at=now,
        )

    def describe(self) -> str:
        return f'already checked in at {self.checked_in_at:%H:%M} by staff {self.staff_id}'
