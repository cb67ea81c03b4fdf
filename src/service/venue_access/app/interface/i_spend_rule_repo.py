from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule


class ISpendRuleRepo(ABC):
    @abstractmethod
    async def create(self, *, rule: SpendRule) -> SpendRule:
        pass

    @abstractmethod
    async def get_by_id(self, *, rule_id: int) -> Optional[SpendRule]:
        pass

    @abstractmethod
    async def list_by_venue(self, *, venue_id: int, active_only: bool = False) -> List[SpendRule]:
        """Highest priority first, then lowest threshold."""
        pass

    @abstractmethod
    async def update(self, *, rule: SpendRule) -> Optional[SpendRule]:
        """Persists the editable fields; None when the rule no longer exists."""
        pass

    @abstractmethod
    async def set_active(self, *, rule_id: int, is_active: bool) -> Optional[SpendRule]:
        pass

    @abstractmethod
    async def record_trigger(self, *, rule_id: int, now: datetime) -> None:
        pass
