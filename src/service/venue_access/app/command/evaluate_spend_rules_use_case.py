"""
Evaluate Spend Rules Use Case

Runs after every stored, matched, COMPLETED transaction and after a
retroactive card match. Each crossed rule whose tier the user does not hold
yet becomes a grant. Concurrent evaluations for the same user race on the
UNIQUE(user_id, venue_id, tier) insert; the loser sees "already held".
"""

from typing import List

from opentelemetry import trace

from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.venue_access.app.interface.i_access_grant_repo import IAccessGrantRepo
from src.service.venue_access.app.interface.i_pos_transaction_repo import IPosTransactionRepo
from src.service.venue_access.app.interface.i_spend_rule_repo import ISpendRuleRepo
from src.service.venue_access.domain.domain_event.tier_unlocked_event import TierUnlockedEvent
from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant


class EvaluateSpendRulesUseCase:
    def __init__(
        self,
        *,
        spend_rule_repo: ISpendRuleRepo,
        access_grant_repo: IAccessGrantRepo,
        pos_transaction_repo: IPosTransactionRepo,
        event_broadcaster: IInMemoryEventBroadcaster,
        clock: IClock,
    ) -> None:
        self.spend_rule_repo = spend_rule_repo
        self.access_grant_repo = access_grant_repo
        self.pos_transaction_repo = pos_transaction_repo
        self.event_broadcaster = event_broadcaster
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(self, *, user_id: int, venue_id: int) -> List[AccessGrant]:
        """Returns only the grants created by this call."""
        with self.tracer.start_as_current_span(
            'use_case.evaluate_spend_rules',
            attributes={'venue.id': venue_id, 'user.id': user_id},
        ) as span:
            new_grants = await self._evaluate(user_id=user_id, venue_id=venue_id)
            span.set_attribute('grants.created', len(new_grants))
            return new_grants

    async def _evaluate(self, *, user_id: int, venue_id: int) -> List[AccessGrant]:
        rules = await self.spend_rule_repo.list_by_venue(venue_id=venue_id, active_only=True)
        if not rules:
            return []

        # Revoked rows count as held: a revoked tier is never granted again automatically
        held = await self.access_grant_repo.list_held_tiers(user_id=user_id, venue_id=venue_id)
        candidates = [rule for rule in rules if rule.tier not in held]
        if not candidates:
            return []

        now = self.clock.now()
        window_starts = [rule.window_start(now=now) for rule in candidates]
        since = None if None in window_starts else min(s for s in window_starts if s is not None)
        transactions = await self.pos_transaction_repo.list_counting_for_user(
            user_id=user_id, venue_id=venue_id, since=since
        )
        if not transactions:
            return []

        new_grants: List[AccessGrant] = []
        for rule in candidates:
            if rule.tier in held:
                # A higher-priority rule for the same tier already decided it
                continue

            spend = rule.qualifying_spend(transactions, now=now)
            if spend < rule.threshold:
                continue

            held.add(rule.tier)
            grant = await self.access_grant_repo.try_create(
                grant=AccessGrant.from_rule(rule=rule, user_id=user_id, now=now)
            )
            if grant is None:
                Logger.base.info(
                    f'💎 [SPEND_RULE] User {user_id} already holds {rule.tier} '
                    f'at venue {venue_id}'
                )
                continue

            if rule.id is not None:
                await self.spend_rule_repo.record_trigger(rule_id=rule.id, now=now)
            await self.event_broadcaster.broadcast(
                venue_id=venue_id, event_data=TierUnlockedEvent.from_grant(grant=grant).to_dict()
            )
            metrics.access_grants_created.labels(tier=grant.tier.value, source='rule').inc()
            Logger.base.info(
                f'💎 [SPEND_RULE] Rule {rule.id} ({rule.name}) unlocked {grant.tier} '
                f'for user {user_id} at venue {venue_id}: spend={spend} >= {rule.threshold}'
            )
            new_grants.append(grant)

        return new_grants
