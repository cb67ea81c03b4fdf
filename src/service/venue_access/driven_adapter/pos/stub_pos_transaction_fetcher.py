from collections import defaultdict
from datetime import datetime
from typing import DefaultDict, List, Tuple

from src.platform.exception.exceptions import TransientError
from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.dto.fetched_transactions import FetchedTransactions
from src.service.venue_access.app.interface.i_pos_transaction_fetcher import (
    IPosTransactionFetcher,
)
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction


class StubPosTransactionFetcher(IPosTransactionFetcher):
    """
    In-memory provider for local development and tests.

    ``seed`` adds transactions; ``fail_next`` makes the next fetches raise
    TransientError, as an unreachable provider would.
    """

    def __init__(self) -> None:
        self._transactions: DefaultDict[Tuple[PosProvider, int], List[RawTransaction]] = (
            defaultdict(list)
        )
        self._pending_failures = 0
        self.calls = 0

    def seed(self, *, provider: PosProvider, venue_id: int, raw: RawTransaction) -> None:
        self._transactions[(provider, venue_id)].append(raw)

    def fail_next(self, count: int = 1) -> None:
        self._pending_failures += count

    async def fetch_transactions(
        self,
        *,
        provider: PosProvider,
        venue_id: int,
        location_id: str,
        since: datetime,
        until: datetime,
    ) -> FetchedTransactions:
        self.calls += 1
        if self._pending_failures > 0:
            self._pending_failures -= 1
            raise TransientError(f'Stub {provider} fetch failure for venue {venue_id}')

        window = [
            raw
            for raw in self._transactions[(provider, venue_id)]
            if since <= raw.occurred_at < until
        ]
        Logger.base.debug(f'🧪 [POS_STUB] Venue {venue_id} {provider}: {len(window)} transactions')
        return FetchedTransactions(transactions=window)
