from abc import ABC, abstractmethod
from typing import Optional


class ICardLinkRepo(ABC):
    @abstractmethod
    async def get_user_id(self, *, card_token: str) -> Optional[int]:
        pass

    @abstractmethod
    async def upsert(self, *, card_token: str, user_id: int) -> None:
        pass
