from datetime import datetime
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.ticketing.domain.enum.rejection_reason import TransferRejectReason
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.value_object.qr_token import generate_qr_token


@attrs.define
class Ticket:
    event_id: int
    tier_id: int
    owner_id: int
    qr_token: str = attrs.field(repr=False)
    reservation_id: Optional[UUID] = None
    status: TicketStatus = TicketStatus.ACTIVE
    purchased_at: Optional[datetime] = None
    redeemed_at: Optional[datetime] = None
    transferred_from: Optional[int] = None
    transferred_at: Optional[datetime] = None
    id: Optional[int] = None

    @classmethod
    def issue(
        cls,
        *,
        event_id: int,
        tier_id: int,
        owner_id: int,
        reservation_id: UUID,
        now: datetime,
    ) -> 'Ticket':
        return cls(
            event_id=event_id,
            tier_id=tier_id,
            owner_id=owner_id,
            qr_token=generate_qr_token(),
            reservation_id=reservation_id,
            purchased_at=now,
        )

    def transfer_rejection(
        self, *, from_user_id: int, to_user_id: int
    ) -> Optional[TransferRejectReason]:
        if self.owner_id != from_user_id:
            return TransferRejectReason.NOT_OWNER
        # A redeemed ticket is never transferable: check-in wins once it has committed
        if self.status != TicketStatus.ACTIVE or from_user_id == to_user_id:
            return TransferRejectReason.INVALID_STATE
        return None
