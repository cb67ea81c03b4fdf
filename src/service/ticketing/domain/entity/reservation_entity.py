from datetime import datetime, timedelta
from typing import Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from src.platform.exception.exceptions import DomainError
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus


MAX_TICKETS_PER_RESERVATION = 10


@attrs.define
class Reservation:
    """Units of a tier held against inventory until payment confirms or the hold lapses."""

    id: UUID
    tier_id: int
    event_id: int
    user_id: int
    quantity: int
    expires_at: datetime
    status: ReservationStatus = ReservationStatus.HELD
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        tier_id: int,
        event_id: int,
        user_id: int,
        quantity: int,
        now: datetime,
        hold: timedelta,
    ) -> 'Reservation':
        if not 1 <= quantity <= MAX_TICKETS_PER_RESERVATION:
            raise DomainError(f'quantity must be between 1 and {MAX_TICKETS_PER_RESERVATION}')
        return cls(
            id=uuid_utils.uuid7(),
            tier_id=tier_id,
            event_id=event_id,
            user_id=user_id,
            quantity=quantity,
            expires_at=now + hold,
            created_at=now,
        )

    def is_expired(self, *, now: datetime) -> bool:
        return self.status == ReservationStatus.HELD and now >= self.expires_at
