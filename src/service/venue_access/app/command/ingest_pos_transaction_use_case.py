"""
Ingest POS Transaction Use Case

Webhook and polling sync both end here. Dedup is the database's job:
UNIQUE(provider, venue_id, provider_txn_id) turns a replayed delivery into
DEDUPLICATED without a read-before-write, and a duplicate never re-evaluates.
"""

from typing import Any, List, Mapping, Optional

from sqlalchemy.exc import OperationalError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ConflictError, NotFoundError, PosPayloadError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.platform.resilience.retry_with_backoff import retry_with_backoff
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.command.evaluate_spend_rules_use_case import (
    EvaluateSpendRulesUseCase,
)
from src.service.venue_access.app.dto.ingest_result import IngestResult
from src.service.venue_access.app.interface.i_card_link_repo import ICardLinkRepo
from src.service.venue_access.app.interface.i_pos_payload_normalizer import IPosPayloadNormalizer
from src.service.venue_access.app.interface.i_pos_transaction_repo import IPosTransactionRepo
from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.sync_status import IngestOutcome
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction


class IngestPosTransactionUseCase:
    def __init__(
        self,
        *,
        pos_transaction_repo: IPosTransactionRepo,
        card_link_repo: ICardLinkRepo,
        evaluate_spend_rules: EvaluateSpendRulesUseCase,
        normalizers: Mapping[str, IPosPayloadNormalizer],
        clock: IClock,
    ) -> None:
        self.pos_transaction_repo = pos_transaction_repo
        self.card_link_repo = card_link_repo
        self.evaluate_spend_rules = evaluate_spend_rules
        self.normalizers = normalizers
        self.clock = clock

    @Logger.io
    async def ingest_payload(
        self,
        *,
        provider: PosProvider,
        venue_id: int,
        payload: Mapping[str, Any],
        principal: Optional[Principal] = None,
    ) -> IngestResult:
        """Webhook entry point: normalize the provider payload, then ingest it."""
        if principal is not None:
            principal.ensure_can_manage_venue(venue_id)

        normalizer = self.normalizers.get(provider)
        if normalizer is None:
            raise NotFoundError(f'No payload normalizer for provider {provider}')

        try:
            raw = normalizer.normalize(payload)
        except PosPayloadError as e:
            metrics.pos_transactions_ingested.labels(
                provider=provider.value, outcome='malformed'
            ).inc()
            Logger.base.warning(
                f'💳 [POS_INGEST] Malformed {provider} payload for venue {venue_id}: {e.message}'
            )
            raise

        return await self.execute(provider=provider, venue_id=venue_id, raw=raw)

    @Logger.io
    async def execute(
        self, *, provider: PosProvider, venue_id: int, raw: RawTransaction
    ) -> IngestResult:
        user_id = (
            await self.card_link_repo.get_user_id(card_token=raw.card_token)
            if raw.card_token
            else None
        )
        transaction = PosTransaction.from_raw(
            provider=provider, venue_id=venue_id, raw=raw, user_id=user_id, now=self.clock.now()
        )

        stored = await retry_with_backoff(
            lambda: self.pos_transaction_repo.insert(transaction=transaction),
            label='POS_INGEST',
            retry_on=(OperationalError,),
            max_attempts=settings.POS_INGEST_MAX_RETRIES,
            base_delay=settings.POS_INGEST_RETRY_BASE_DELAY_SECONDS,
        )

        if stored is None:
            existing = await self.pos_transaction_repo.get_by_provider_txn_id(
                provider=provider, venue_id=venue_id, provider_txn_id=raw.provider_txn_id
            )
            if existing is None:
                raise ConflictError(
                    f'{provider} transaction {raw.provider_txn_id} conflicted but was not found'
                )
            metrics.pos_transactions_ingested.labels(
                provider=provider.value, outcome='deduplicated'
            ).inc()
            Logger.base.debug(
                f'💳 [POS_INGEST] Duplicate {provider} txn {raw.provider_txn_id} '
                f'at venue {venue_id}'
            )
            return IngestResult(outcome=IngestOutcome.DEDUPLICATED, transaction=existing)

        metrics.pos_transactions_ingested.labels(provider=provider.value, outcome='stored').inc()
        Logger.base.info(
            f'💳 [POS_INGEST] Stored {provider} txn {raw.provider_txn_id} at venue {venue_id}: '
            f'{raw.amount} {raw.currency} {raw.status} (matched={user_id is not None})'
        )

        new_grants = []
        if stored.counts_toward_spend and stored.user_id is not None:
            new_grants = await self._evaluate(stored)
        return IngestResult(outcome=IngestOutcome.STORED, transaction=stored, new_grants=new_grants)

    async def _evaluate(self, stored: PosTransaction) -> List[AccessGrant]:
        # The row is already committed and a redelivery only deduplicates, so a failure here
        # is logged, not raised. The next evaluation for this user covers the whole window.
        try:
            return await self.evaluate_spend_rules.execute(
                user_id=stored.user_id, venue_id=stored.venue_id
            )
        except Exception:
            metrics.spend_rule_evaluation_failures.labels(provider=stored.provider.value).inc()
            Logger.base.exception(
                f'🎟️ [POS_INGEST] Spend rule evaluation failed for user {stored.user_id} '
                f'at venue {stored.venue_id} after storing txn {stored.provider_txn_id}'
            )
            return []
