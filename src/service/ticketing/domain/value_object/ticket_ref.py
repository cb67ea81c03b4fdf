from typing import Optional

import attrs

from src.service.ticketing.domain.enum.rejection_reason import CheckInRejectReason
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


@attrs.define(frozen=True)
class TicketRef:
    """What a door scanner learns from a token, without consuming it."""

    ticket_id: int
    event_id: int
    venue_id: int
    tier_id: int
    tier_name: str
    owner_id: int
    status: TicketStatus

    def redemption_rejection(self) -> Optional[CheckInRejectReason]:
        if self.status == TicketStatus.REDEEMED:
            return CheckInRejectReason.ALREADY_REDEEMED
        if self.status != TicketStatus.ACTIVE:
            return CheckInRejectReason.TICKET_NOT_ACTIVE
        return None
