"""
Venue-side POS management: disconnecting an integration, browsing stored
transactions and editing spend rules in place.
"""

from datetime import timedelta

import pytest

from src.platform.exception.exceptions import DomainError, ForbiddenError, NotFoundError
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.enum.sync_status import SyncStatus
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction
from test.test_constants import CARD_TOKEN, CUSTOMER_ID, OTHER_VENUE_ID, VENUE_ID


def _raw(
    txn_id: str,
    occurred_at,
    *,
    amount: int = 1_000,
    status: PosTransactionStatus = PosTransactionStatus.COMPLETED,
) -> RawTransaction:
    return RawTransaction(
        provider_txn_id=txn_id,
        amount=amount,
        currency='USD',
        status=status,
        occurred_at=occurred_at,
        card_token=CARD_TOKEN,
    )


class TestDisconnect:
    async def test_disconnected_integration_is_not_synced(
        self, connect_pos_integration, disconnect_pos_integration, sync, staff
    ):
        await connect_pos_integration.execute(
            principal=staff, venue_id=VENUE_ID, provider=PosProvider.SQUARE, location_id='LOC-1'
        )

        disconnected = await disconnect_pos_integration.execute(
            principal=staff, venue_id=VENUE_ID, provider=PosProvider.SQUARE
        )

        assert not disconnected.is_active
        with pytest.raises(DomainError):
            await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)
        assert await sync.sync_all_active() == 0

    async def test_reconnect_reactivates_and_resumes_from_cursor(
        self,
        connect_pos_integration,
        disconnect_pos_integration,
        sync,
        pos_integration_repo,
        staff,
        clock,
    ):
        await connect_pos_integration.execute(
            principal=staff, venue_id=VENUE_ID, provider=PosProvider.SQUARE, location_id='LOC-1'
        )
        cursor = clock.now()
        await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)
        await disconnect_pos_integration.execute(
            principal=staff, venue_id=VENUE_ID, provider=PosProvider.SQUARE
        )

        clock.advance(hours=1)
        reconnected = await connect_pos_integration.execute(
            principal=staff, venue_id=VENUE_ID, provider=PosProvider.SQUARE, location_id='LOC-2'
        )

        assert reconnected.is_active
        assert reconnected.location_id == 'LOC-2'
        assert reconnected.last_sync_at == cursor
        summary = await sync.execute(venue_id=VENUE_ID, provider=PosProvider.SQUARE)
        assert summary.since == cursor
        integration = await pos_integration_repo.get(
            venue_id=VENUE_ID, provider=PosProvider.SQUARE
        )
        assert integration.last_sync_status == SyncStatus.SUCCESS

    async def test_unknown_integration_and_foreign_staff(
        self, connect_pos_integration, disconnect_pos_integration, staff, other_venue_staff
    ):
        with pytest.raises(NotFoundError):
            await disconnect_pos_integration.execute(
                principal=staff, venue_id=VENUE_ID, provider=PosProvider.TOAST
            )

        await connect_pos_integration.execute(
            principal=staff, venue_id=VENUE_ID, provider=PosProvider.SQUARE, location_id='LOC-1'
        )
        with pytest.raises(ForbiddenError):
            await disconnect_pos_integration.execute(
                principal=other_venue_staff, venue_id=VENUE_ID, provider=PosProvider.SQUARE
            )


class TestTransactionListing:
    @pytest.fixture
    async def stored(self, ingest, clock) -> None:
        now = clock.now()
        for i in range(5):
            await ingest.execute(
                provider=PosProvider.SQUARE,
                venue_id=VENUE_ID,
                raw=_raw(f'ok-{i}', now - timedelta(hours=i + 1)),
            )
        await ingest.execute(
            provider=PosProvider.SQUARE,
            venue_id=VENUE_ID,
            raw=_raw('refund', now - timedelta(minutes=30), status=PosTransactionStatus.REFUNDED),
        )
        await ingest.execute(
            provider=PosProvider.SQUARE,
            venue_id=OTHER_VENUE_ID,
            raw=_raw('elsewhere', now - timedelta(minutes=10)),
        )

    async def test_pages_are_newest_first(self, list_pos_transactions, stored, staff):
        first = await list_pos_transactions.execute(principal=staff, venue_id=VENUE_ID, limit=4)
        second = await list_pos_transactions.execute(
            principal=staff, venue_id=VENUE_ID, limit=4, offset=4
        )

        assert [t.provider_txn_id for t in first.transactions] == [
            'refund',
            'ok-0',
            'ok-1',
            'ok-2',
        ]
        assert (first.total, first.has_more) == (6, True)
        assert [t.provider_txn_id for t in second.transactions] == ['ok-3', 'ok-4']
        assert not second.has_more

    async def test_status_and_date_filters(self, list_pos_transactions, stored, staff, clock):
        now = clock.now()

        refunds = await list_pos_transactions.execute(
            principal=staff, venue_id=VENUE_ID, status=PosTransactionStatus.REFUNDED
        )
        recent = await list_pos_transactions.execute(
            principal=staff,
            venue_id=VENUE_ID,
            status=PosTransactionStatus.COMPLETED,
            since=now - timedelta(hours=3),
            until=now - timedelta(hours=2),
        )

        assert [t.provider_txn_id for t in refunds.transactions] == ['refund']
        assert [t.provider_txn_id for t in recent.transactions] == ['ok-1', 'ok-2']
        assert recent.total == 2

    async def test_invalid_queries(self, list_pos_transactions, staff, other_venue_staff, clock):
        now = clock.now()
        with pytest.raises(DomainError):
            await list_pos_transactions.execute(principal=staff, venue_id=VENUE_ID, limit=0)
        with pytest.raises(DomainError):
            await list_pos_transactions.execute(principal=staff, venue_id=VENUE_ID, offset=-1)
        with pytest.raises(DomainError):
            await list_pos_transactions.execute(
                principal=staff, venue_id=VENUE_ID, since=now, until=now - timedelta(days=1)
            )
        with pytest.raises(ForbiddenError):
            await list_pos_transactions.execute(principal=other_venue_staff, venue_id=VENUE_ID)


class TestSpendRuleUpdate:
    @pytest.fixture
    async def rule(self, spend_rule_repo) -> SpendRule:
        return await spend_rule_repo.create(
            rule=SpendRule.create(
                venue_id=VENUE_ID,
                name='Regular',
                threshold=500,
                tier=AccessTier.REGULAR,
                access_level=AccessLevel.PUBLIC_LOBBY,
                window_days=30,
            )
        )

    async def test_update_keeps_trigger_statistics_and_grants(
        self,
        update_spend_rule,
        ingest,
        card_link_repo,
        access_grant_repo,
        spend_rule_repo,
        rule,
        staff,
        clock,
    ):
        await card_link_repo.upsert(card_token=CARD_TOKEN, user_id=CUSTOMER_ID)
        unlocked = await ingest.execute(
            provider=PosProvider.SQUARE,
            venue_id=VENUE_ID,
            raw=_raw('first', clock.now() - timedelta(hours=1), amount=600),
        )
        assert len(unlocked.new_grants) == 1

        updated = await update_spend_rule.execute(
            principal=staff,
            rule_id=rule.id,
            changes={'threshold': 10_000, 'live_window_start': '22:00', 'live_window_end': '02:00'},
        )

        assert updated.threshold == 10_000
        assert updated.live_window is not None
        assert updated.times_triggered == 1
        assert updated.is_active
        stored = await spend_rule_repo.get_by_id(rule_id=rule.id)
        assert stored.threshold == 10_000
        grants = await access_grant_repo.list_grants(
            venue_id=VENUE_ID, user_id=CUSTOMER_ID, include_revoked=False
        )
        assert [g.tier for g in grants] == [AccessTier.REGULAR]

    async def test_empty_change_set_returns_rule_unchanged(self, update_spend_rule, rule, staff):
        same = await update_spend_rule.execute(principal=staff, rule_id=rule.id, changes={})

        assert same == rule

    @pytest.mark.parametrize(
        'changes',
        [
            {'threshold': None},
            {'live_window_start': '22:00'},
            {'timezone': 'Mars/Olympus_Mons'},
            {'is_active': False},
        ],
    )
    async def test_invalid_changes_leave_rule_untouched(
        self, update_spend_rule, spend_rule_repo, rule, staff, changes
    ):
        with pytest.raises(DomainError):
            await update_spend_rule.execute(principal=staff, rule_id=rule.id, changes=changes)

        assert await spend_rule_repo.get_by_id(rule_id=rule.id) == rule

    async def test_unknown_rule_and_foreign_staff(
        self, update_spend_rule, rule, other_venue_staff, staff
    ):
        with pytest.raises(NotFoundError):
            await update_spend_rule.execute(principal=staff, rule_id=404, changes={'priority': 1})
        with pytest.raises(ForbiddenError):
            await update_spend_rule.execute(
                principal=other_venue_staff, rule_id=rule.id, changes={'priority': 1}
            )
