from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Set

from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier


class IAccessGrantRepo(ABC):
    @abstractmethod
    async def try_create(self, *, grant: AccessGrant) -> Optional[AccessGrant]:
        """Insert; None when (user_id, venue_id, tier) is already held, revoked or not."""
        pass

    @abstractmethod
    async def get_by_id(self, *, grant_id: int) -> Optional[AccessGrant]:
        pass

    @abstractmethod
    async def get(self, *, user_id: int, venue_id: int, tier: AccessTier) -> Optional[AccessGrant]:
        pass

    @abstractmethod
    async def list_held_tiers(self, *, user_id: int, venue_id: int) -> Set[AccessTier]:
        """Every tier with a row for the user at the venue, revoked rows included."""
        pass

    @abstractmethod
    async def restore(
        self, *, grant_id: int, access_level: AccessLevel, granted_by: int, now: datetime
    ) -> Optional[AccessGrant]:
        """Guarded on ``revoked_at IS NOT NULL``."""
        pass

    @abstractmethod
    async def revoke(
        self, *, grant_id: int, revoked_by: int, now: datetime
    ) -> Optional[AccessGrant]:
        """Guarded on ``revoked_at IS NULL``."""
        pass

    @abstractmethod
    async def list_grants(
        self,
        *,
        venue_id: Optional[int] = None,
        user_id: Optional[int] = None,
        include_revoked: bool = False,
    ) -> List[AccessGrant]:
        pass
