from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from uuid_utils import UUID

from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.value_object.ticket_ref import TicketRef


class ITicketRepo(ABC):
    @abstractmethod
    async def issue_for_reservation(
        self, *, reservation_id: UUID, owner_id: int, tickets: List[Ticket]
    ) -> Optional[List[Ticket]]:
        """
        HELD → CONFIRMED and insert ``tickets`` in the same transaction.

        Returns:
            Persisted tickets, or None when the reservation is no longer HELD for ``owner_id``
        """
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: int) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def get_ref_by_token(self, *, qr_token: str) -> Optional[TicketRef]:
        """Read-only lookup; never changes ticket state."""
        pass

    @abstractmethod
    async def transfer(
        self, *, ticket_id: int, from_user_id: int, to_user_id: int, now: datetime
    ) -> Optional[Ticket]:
        """
        Guarded owner swap (owner == from_user_id AND status == ACTIVE), token unchanged.

        Returns:
            Updated ticket, or None if the guard did not match at write time
        """
        pass

    @abstractmethod
    async def list_by_owner(self, *, owner_id: int) -> List[Ticket]:
        pass
