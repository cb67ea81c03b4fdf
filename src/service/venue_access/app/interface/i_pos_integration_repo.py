from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.enum.pos_provider import PosProvider


class IPosIntegrationRepo(ABC):
    @abstractmethod
    async def upsert(self, *, integration: PosIntegration) -> PosIntegration:
        """Create, or update location and reactivate; the sync cursor is kept."""
        pass

    @abstractmethod
    async def deactivate(
        self, *, venue_id: int, provider: PosProvider
    ) -> Optional[PosIntegration]:
        """Stops scheduled and manual syncs; cursor and history are kept for a reconnect."""
        pass

    @abstractmethod
    async def get(self, *, venue_id: int, provider: PosProvider) -> Optional[PosIntegration]:
        pass

    @abstractmethod
    async def list_by_venue(self, *, venue_id: int) -> List[PosIntegration]:
        pass

    @abstractmethod
    async def list_active(self) -> List[PosIntegration]:
        pass

    @abstractmethod
    async def record_success(self, *, integration_id: int, cursor: datetime) -> None:
        pass

    @abstractmethod
    async def record_failure(self, *, integration_id: int, error: str) -> None:
        """Cursor untouched."""
        pass
