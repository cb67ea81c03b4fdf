"""
Inventory Ledger Repository Interface

Sole writer of ``ticket_tier.sold``. Every mutation is a guarded single-row
UPDATE committed together with the reservation/ticket row it accounts for.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from uuid_utils import UUID

from src.service.ticketing.domain.entity.reservation_entity import Reservation
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus


class IInventoryLedgerRepo(ABC):
    @abstractmethod
    async def get_tier(self, *, tier_id: int) -> Optional[TicketTier]:
        pass

    @abstractmethod
    async def reserve(self, *, reservation: Reservation) -> bool:
        """
        Compare-and-increment ``sold`` by ``reservation.quantity`` and insert the hold.

        Returns:
            False when the increment would exceed the tier quantity (nothing written)
        """
        pass

    @abstractmethod
    async def get_reservation(self, *, reservation_id: UUID) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def release(
        self, *, reservation_id: UUID, final_status: ReservationStatus
    ) -> Optional[Reservation]:
        """
        HELD → ``final_status`` (RELEASED or EXPIRED) and return the units to inventory.

        Returns:
            The released reservation, or None if it was no longer HELD (at most once)
        """
        pass

    @abstractmethod
    async def list_expired_hold_ids(self, *, now: datetime, limit: int) -> List[UUID]:
        pass

    @abstractmethod
    async def cancel_ticket(self, *, ticket_id: int, owner_id: int) -> Optional[Ticket]:
        """
        ACTIVE → CANCELLED for the owner's ticket and give its unit back (sold - 1).

        Returns:
            The cancelled ticket, or None if it was not ACTIVE / not owned by ``owner_id``
        """
        pass
