from abc import ABC, abstractmethod
from datetime import datetime
from typing import Collection, List, Optional

from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.enum.guest_list_status import GuestListStatus


class IGuestListRepo(ABC):
    @abstractmethod
    async def add(self, *, entry: GuestListEntry) -> GuestListEntry:
        pass

    @abstractmethod
    async def get_by_id(self, *, entry_id: int) -> Optional[GuestListEntry]:
        pass

    @abstractmethod
    async def transition_status(
        self,
        *,
        entry_id: int,
        from_statuses: Collection[GuestListStatus],
        to_status: GuestListStatus,
    ) -> Optional[GuestListEntry]:
        """Guarded status change; None when the stored status is not in ``from_statuses``."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        *,
        venue_id: int,
        event_id: Optional[int] = None,
        status: Optional[GuestListStatus] = None,
    ) -> List[GuestListEntry]:
        pass

    @abstractmethod
    async def mark_no_shows(self, *, event_id: int, venue_id: int) -> int:
        """The venue's CONFIRMED entries of the event with no CheckInRecord → NO_SHOW."""
        pass

    @abstractmethod
    async def list_event_ids_pending_reconciliation(self, *, now: datetime) -> List[int]:
        """Ended events that still have CONFIRMED entries."""
        pass
