"""
Sync POS Transactions Use Case

Polls one venue's provider for everything since the cursor.

- ``sync_started_at`` is captured before the fetch and becomes the next cursor
- The cursor moves only after every item of the batch was processed; a
  failed fetch or store records FAILED and leaves it where it was
- Overlap between windows is harmless: ingest deduplicates
"""

from datetime import timedelta
import time
from typing import Optional

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DomainError, NotFoundError, TransientError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.platform.resilience.retry_with_backoff import retry_with_backoff
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.command.ingest_pos_transaction_use_case import (
    IngestPosTransactionUseCase,
)
from src.service.venue_access.app.dto.sync_summary import SyncSummary
from src.service.venue_access.app.interface.i_pos_integration_repo import IPosIntegrationRepo
from src.service.venue_access.app.interface.i_pos_transaction_fetcher import (
    IPosTransactionFetcher,
)
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.sync_status import IngestOutcome


class SyncPosTransactionsUseCase:
    def __init__(
        self,
        *,
        pos_integration_repo: IPosIntegrationRepo,
        pos_transaction_fetcher: IPosTransactionFetcher,
        ingest_pos_transaction: IngestPosTransactionUseCase,
        clock: IClock,
    ) -> None:
        self.pos_integration_repo = pos_integration_repo
        self.pos_transaction_fetcher = pos_transaction_fetcher
        self.ingest_pos_transaction = ingest_pos_transaction
        self.clock = clock

    @Logger.io
    async def execute(
        self, *, venue_id: int, provider: PosProvider, principal: Optional[Principal] = None
    ) -> SyncSummary:
        if principal is not None:
            principal.ensure_can_manage_venue(venue_id)

        integration = await self.pos_integration_repo.get(venue_id=venue_id, provider=provider)
        if integration is None:
            raise NotFoundError(f'Venue {venue_id} has no {provider} integration')
        if not integration.is_active:
            raise DomainError(f'{provider} integration of venue {venue_id} is disabled')

        return await self._sync(integration=integration)

    @Logger.io
    async def sync_all_active(self) -> int:
        """Periodic job entry point; one venue failing does not stop the others."""
        synced = 0
        for integration in await self.pos_integration_repo.list_active():
            try:
                await self._sync(integration=integration)
                synced += 1
            except Exception as e:
                Logger.base.exception(
                    f'❌ [POS_SYNC] Venue {integration.venue_id} {integration.provider}: '
                    f'{type(e).__name__}: {e}'
                )
        return synced

    async def _sync(self, *, integration: PosIntegration) -> SyncSummary:
        assert integration.id is not None
        venue_id, provider = integration.venue_id, integration.provider

        sync_started_at = self.clock.now()
        since = integration.sync_since(
            now=sync_started_at,
            initial_lookback=timedelta(days=settings.POS_SYNC_INITIAL_LOOKBACK_DAYS),
        )
        started = time.perf_counter()

        stored = deduplicated = new_grants = 0
        try:
            fetched = await retry_with_backoff(
                lambda: self.pos_transaction_fetcher.fetch_transactions(
                    provider=provider,
                    venue_id=venue_id,
                    location_id=integration.location_id,
                    since=since,
                    until=sync_started_at,
                ),
                label='POS_SYNC',
                retry_on=(TransientError,),
                max_attempts=settings.POS_SYNC_MAX_RETRIES,
                base_delay=settings.POS_SYNC_BACKOFF_SECONDS,
                timeout=settings.POS_SYNC_TIMEOUT_SECONDS,
            )

            for raw in fetched.transactions:
                result = await self.ingest_pos_transaction.execute(
                    provider=provider, venue_id=venue_id, raw=raw
                )
                if result.outcome == IngestOutcome.STORED:
                    stored += 1
                else:
                    deduplicated += 1
                new_grants += len(result.new_grants)
        except Exception as e:
            await self.pos_integration_repo.record_failure(
                integration_id=integration.id, error=f'{type(e).__name__}: {e}'
            )
            metrics.pos_sync_failures.labels(provider=provider.value).inc()
            Logger.base.error(
                f'❌ [POS_SYNC] Venue {venue_id} {provider} failed, '
                f'cursor stays at {since.isoformat()}'
            )
            raise
        finally:
            metrics.pos_sync_duration.labels(provider=provider.value).observe(
                time.perf_counter() - started
            )

        if fetched.malformed:
            metrics.pos_transactions_ingested.labels(
                provider=provider.value, outcome='malformed'
            ).inc(fetched.malformed)

        await self.pos_integration_repo.record_success(
            integration_id=integration.id, cursor=sync_started_at
        )
        metrics.pos_last_sync_timestamp.labels(
            venue_id=str(venue_id), provider=provider.value
        ).set(sync_started_at.timestamp())

        summary = SyncSummary(
            venue_id=venue_id,
            provider=provider,
            since=since,
            cursor=sync_started_at,
            fetched=len(fetched.transactions) + fetched.malformed,
            stored=stored,
            deduplicated=deduplicated,
            malformed=fetched.malformed,
            new_grants=new_grants,
        )
        Logger.base.info(
            f'🔄 [POS_SYNC] Venue {venue_id} {provider}: fetched={summary.fetched} '
            f'stored={stored} dup={deduplicated} malformed={fetched.malformed} grants={new_grants}'
        )
        return summary
