"""
Polling sync against the stub fetcher.

The cursor is the sync start time and only advances after the whole batch was
processed; a failed sync leaves it in place so nothing is skipped.
"""

from datetime import timedelta

import pytest

from src.platform.exception.exceptions import DomainError, NotFoundError, TransientError
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.enum.sync_status import SyncStatus
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction
from test.test_constants import CARD_TOKEN, OTHER_VENUE_ID, VENUE_ID


def _raw(txn_id: str, occurred_at, amount: int = 2_500) -> RawTransaction:
    return RawTransaction(
        provider_txn_id=txn_id,
        amount=amount,
        currency='USD',
        status=PosTransactionStatus.COMPLETED,
        occurred_at=occurred_at,
        card_token=CARD_TOKEN,
    )


@pytest.fixture
async def square_integration(pos_integration_repo) -> PosIntegration:
    return await pos_integration_repo.upsert(
        integration=PosIntegration(
            venue_id=VENUE_ID, provider=PosProvider.SQUARE, location_id='LOC-1'
        )
    )


class TestPosSync:
    async def test_first_sync_uses_initial_lookback_and_moves_cursor(
        self, sync, stub_fetcher, square_integration, pos_integration_repo, clock
    ):
        now = clock.now()
        stub_fetcher.seed(
            provider=PosProvider.SQUARE, venue_id=VENUE_ID, raw=_raw('a', now - timedelta(days=1))
        )
        stub_fetcher.seed(
            provider=PosProvider.SQUARE, venue_id=VENUE_ID, raw=_raw('b', now - timedelta(hours=1))
        )
        # Older than the 7 day initial lookback
        stub_fetcher.seed(
            provider=PosProvider.SQUARE, venue_id=VENUE_ID, raw=_raw('c', now - timedelta(days=9))
        )

        summary = await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

        assert summary.since == now - timedelta(days=7)
        assert summary.cursor == now
        assert (summary.fetched, summary.stored, summary.deduplicated) == (2, 2, 0)

        integration = await pos_integration_repo.get(
            venue_id=VENUE_ID, provider=PosProvider.SQUARE
        )
        assert integration.last_sync_at == now
        assert integration.last_sync_status == SyncStatus.SUCCESS
        assert integration.last_sync_error is None

    async def test_next_sync_starts_at_the_cursor(
        self, sync, stub_fetcher, square_integration, clock
    ):
        first_cursor = clock.now()
        await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

        clock.advance(minutes=5)
        stub_fetcher.seed(
            provider=PosProvider.SQUARE,
            venue_id=VENUE_ID,
            raw=_raw('late', first_cursor + timedelta(minutes=2)),
        )
        summary = await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

        assert summary.since == first_cursor
        assert summary.stored == 1

    async def test_failed_sync_keeps_cursor_and_records_error(
        self, sync, stub_fetcher, square_integration, pos_integration_repo, clock
    ):
        first_cursor = clock.now()
        await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

        clock.advance(minutes=5)
        stub_fetcher.fail_next(100)
        with pytest.raises(TransientError):
            await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

        integration = await pos_integration_repo.get(
            venue_id=VENUE_ID, provider=PosProvider.SQUARE
        )
        assert integration.last_sync_at == first_cursor
        assert integration.last_sync_status == SyncStatus.FAILED
        assert 'TransientError' in integration.last_sync_error

    async def test_transient_failure_is_retried(
        self, sync, stub_fetcher, square_integration, clock
    ):
        stub_fetcher.seed(
            provider=PosProvider.SQUARE,
            venue_id=VENUE_ID,
            raw=_raw('a', clock.now() - timedelta(minutes=1)),
        )
        stub_fetcher.fail_next(1)

        summary = await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

        assert summary.stored == 1
        assert stub_fetcher.calls == 2

    async def test_overlapping_windows_deduplicate(
        self, sync, ingest, stub_fetcher, square_integration, clock
    ):
        raw = _raw('webhook-and-poll', clock.now() - timedelta(minutes=1))
        await ingest.execute(provider=PosProvider.SQUARE, venue_id=VENUE_ID, raw=raw)
        stub_fetcher.seed(provider=PosProvider.SQUARE, venue_id=VENUE_ID, raw=raw)

        summary = await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

        assert (summary.stored, summary.deduplicated) == (0, 1)

    async def test_unknown_and_disabled_integrations(
        self, sync, pos_integration_repo, square_integration
    ):
        with pytest.raises(NotFoundError):
            await sync.execute(venue_id=VENUE_ID, provider=PosProvider.TOAST)

        await pos_integration_repo.upsert(
            integration=PosIntegration(
                venue_id=VENUE_ID,
                provider=PosProvider.SQUARE,
                location_id='LOC-1',
                is_active=False,
            )
        )
        with pytest.raises(DomainError):
            await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)

    async def test_sync_all_active_isolates_failures(
        self, sync, stub_fetcher, pos_integration_repo, square_integration, clock
    ):
        await pos_integration_repo.upsert(
            integration=PosIntegration(
                venue_id=OTHER_VENUE_ID, provider=PosProvider.TOAST, location_id='TOAST-9'
            )
        )
        # Every attempt of the first integration fails, the second succeeds
        stub_fetcher.fail_next(4)

        synced = await sync.sync_all_active()

        assert synced == 1
        square = await pos_integration_repo.get(venue_id=VENUE_ID, provider=PosProvider.SQUARE)
        toast = await pos_integration_repo.get(
            venue_id=OTHER_VENUE_ID, provider=PosProvider.TOAST
        )
        assert square.last_sync_status == SyncStatus.FAILED
        assert toast.last_sync_status == SyncStatus.SUCCESS
