from abc import ABC, abstractmethod
from datetime import datetime

from src.service.venue_access.app.dto.fetched_transactions import FetchedTransactions
from src.service.venue_access.domain.enum.pos_provider import PosProvider


class IPosTransactionFetcher(ABC):
    @abstractmethod
    async def fetch_transactions(
        self,
        *,
        provider: PosProvider,
        venue_id: int,
        location_id: str,
        since: datetime,
        until: datetime,
    ) -> FetchedTransactions:
        """
        Transactions in ``[since, until)`` already normalized to RawTransaction.

        Raises TransientError for timeouts, 5xx and rate limiting (safe to retry)
        and UpstreamError for anything the provider will keep refusing.
        """
        pass
