from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier
from src.service.ticketing.domain.enum.event_status import EventStatus


class IEventRepo(ABC):
    @abstractmethod
    async def create_with_tiers(
        self, *, event: Event, tiers: List[TicketTier]
    ) -> tuple[Event, List[TicketTier]]:
        """Insert the event and its tiers in one transaction (tier.event_id is filled in)."""
        pass

    @abstractmethod
    async def get_by_id(self, *, event_id: int) -> Optional[Event]:
        pass

    @abstractmethod
    async def list_tiers(self, *, event_id: int) -> List[TicketTier]:
        pass

    @abstractmethod
    async def update_status(
        self, *, event_id: int, from_status: EventStatus, to_status: EventStatus
    ) -> Optional[Event]:
        """
        Guarded transition: only applies while the stored status is still ``from_status``.

        Returns:
            Updated event, or None when another writer moved the status first
        """
        pass
