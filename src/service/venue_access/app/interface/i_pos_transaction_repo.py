from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from src.service.venue_access.app.dto.pos_transaction_page import PosTransactionPage
from src.service.venue_access.app.dto.venue_revenue_summary import VenueRevenueSummary
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus


class IPosTransactionRepo(ABC):
    @abstractmethod
    async def insert(self, *, transaction: PosTransaction) -> Optional[PosTransaction]:
        """None when (provider, venue_id, provider_txn_id) already exists."""
        pass

    @abstractmethod
    async def get_by_provider_txn_id(
        self, *, provider: PosProvider, venue_id: int, provider_txn_id: str
    ) -> Optional[PosTransaction]:
        pass

    @abstractmethod
    async def list_counting_for_user(
        self, *, user_id: int, venue_id: int, since: Optional[datetime] = None
    ) -> List[PosTransaction]:
        """COMPLETED, matched transactions of the user at the venue."""
        pass

    @abstractmethod
    async def assign_user_by_card_token(self, *, card_token: str, user_id: int) -> Dict[int, int]:
        """
        Set ``user_id`` on every unmatched transaction paid with the card.

        Returns rows matched per venue_id. Already-matched rows are left alone.
        """
        pass

    @abstractmethod
    async def list_by_venue(
        self,
        *,
        venue_id: int,
        status: Optional[PosTransactionStatus] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int,
        offset: int,
    ) -> PosTransactionPage:
        """``since`` and ``until`` are inclusive bounds on ``occurred_at``."""
        pass

    @abstractmethod
    async def summarize_revenue(
        self, *, venue_id: int, since: Optional[datetime] = None
    ) -> VenueRevenueSummary:
        pass
