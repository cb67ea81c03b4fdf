from datetime import datetime, time, timedelta, timezone

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.value_object.live_window import LiveWindow
from test.test_constants import CUSTOMER_ID, OTHER_VENUE_ID, VENUE_ID


NOW = datetime(2026, 6, 2, 4, 0, tzinfo=timezone.utc)


def _txn(
    *,
    amount: int,
    occurred_at: datetime,
    status: PosTransactionStatus = PosTransactionStatus.COMPLETED,
    user_id: int | None = CUSTOMER_ID,
    venue_id: int = VENUE_ID,
) -> PosTransaction:
    return PosTransaction(
        provider=PosProvider.SQUARE,
        venue_id=venue_id,
        provider_txn_id=f'txn-{amount}-{occurred_at.isoformat()}',
        amount=amount,
        currency='USD',
        status=status,
        occurred_at=occurred_at,
        user_id=user_id,
    )


@pytest.mark.unit
class TestLiveWindow:
    def test_window_wrapping_midnight_admits_both_sides(self):
        window = LiveWindow.parse(start='22:00', end='02:00')

        assert window is not None
        assert window.wraps_midnight
        assert window.contains(time(23, 30))
        assert window.contains(time(0, 15))
        assert window.contains(time(2, 0))
        assert not window.contains(time(2, 1))
        assert not window.contains(time(21, 59))

    def test_same_day_window(self):
        window = LiveWindow.parse(start='18:00', end='20:00')

        assert window is not None
        assert not window.wraps_midnight
        assert window.contains(time(19, 0))
        assert not window.contains(time(20, 30))

    def test_no_window_when_both_ends_missing(self):
        assert LiveWindow.parse(start=None, end=None) is None

    @pytest.mark.parametrize(
        'start,end',
        [
            ('22:00', None),
            (None, '02:00'),
            ('25:00', '02:00'),
            ('10pm', '02:00'),
            ('22:00', '22:00'),
        ],
    )
    def test_invalid_windows_are_rejected(self, start, end):
        with pytest.raises(DomainError):
            LiveWindow.parse(start=start, end=end)


@pytest.mark.unit
class TestSpendRuleCreate:
    def test_create_strips_name(self):
        rule = SpendRule.create(
            venue_id=VENUE_ID,
            name='  Regular  ',
            threshold=10_000,
            tier=AccessTier.REGULAR,
            access_level=AccessLevel.PUBLIC_LOBBY,
        )

        assert rule.name == 'Regular'
        assert rule.is_active
        assert rule.times_triggered == 0

    @pytest.mark.parametrize(
        'overrides',
        [
            {'threshold': 0},
            {'threshold': -1},
            {'name': '   '},
            {'window_days': 0},
            {'live_window_start': '22:00'},
            {'timezone': 'Mars/Olympus_Mons'},
        ],
    )
    def test_invalid_rules_are_rejected(self, overrides):
        params = {
            'venue_id': VENUE_ID,
            'name': 'Whale',
            'threshold': 100_000,
            'tier': AccessTier.WHALE,
            'access_level': AccessLevel.INNER_CIRCLE,
        }
        params.update(overrides)

        with pytest.raises(DomainError):
            SpendRule.create(**params)


@pytest.mark.unit
class TestSpendRuleCounting:
    def test_only_matched_completed_transactions_at_the_venue_count(self):
        rule = SpendRule.create(
            venue_id=VENUE_ID,
            name='Platinum',
            threshold=50_000,
            tier=AccessTier.PLATINUM,
            access_level=AccessLevel.INNER_CIRCLE,
        )
        occurred = NOW - timedelta(hours=1)
        transactions = [
            _txn(amount=20_000, occurred_at=occurred),
            _txn(amount=20_000, occurred_at=occurred, status=PosTransactionStatus.REFUNDED),
            _txn(amount=20_000, occurred_at=occurred, status=PosTransactionStatus.PENDING),
            _txn(amount=20_000, occurred_at=occurred, user_id=None),
            _txn(amount=20_000, occurred_at=occurred, venue_id=OTHER_VENUE_ID),
        ]

        assert rule.qualifying_spend(transactions, now=NOW) == 20_000
        assert not rule.is_crossed_by(transactions, now=NOW)

    def test_rolling_window_excludes_older_spend(self):
        rule = SpendRule.create(
            venue_id=VENUE_ID,
            name='Regular',
            threshold=10_000,
            tier=AccessTier.REGULAR,
            access_level=AccessLevel.PUBLIC_LOBBY,
            window_days=30,
        )
        transactions = [
            _txn(amount=6_000, occurred_at=NOW - timedelta(days=31)),
            _txn(amount=6_000, occurred_at=NOW - timedelta(days=29)),
        ]

        assert rule.window_start(now=NOW) == NOW - timedelta(days=30)
        assert rule.qualifying_spend(transactions, now=NOW) == 6_000

    def test_live_window_is_evaluated_in_venue_local_time(self):
        # 22:00-02:00 New York is 02:00-06:00 UTC in June (EDT, UTC-4)
        rule = SpendRule.create(
            venue_id=VENUE_ID,
            name='Late night',
            threshold=30_000,
            tier=AccessTier.PLATINUM,
            access_level=AccessLevel.INNER_CIRCLE,
            live_window_start='22:00',
            live_window_end='02:00',
            timezone='America/New_York',
        )
        inside = _txn(amount=30_000, occurred_at=datetime(2026, 6, 2, 3, 30, tzinfo=timezone.utc))
        outside = _txn(
            amount=30_000, occurred_at=datetime(2026, 6, 1, 22, 30, tzinfo=timezone.utc)
        )

        assert rule.counts(inside, now=NOW)
        assert not rule.counts(outside, now=NOW)


@pytest.mark.unit
class TestSpendRuleRevise:
    @pytest.fixture
    def rule(self) -> SpendRule:
        rule = SpendRule.create(
            venue_id=VENUE_ID,
            name='Big night',
            threshold=50_000,
            tier=AccessTier.PLATINUM,
            access_level=AccessLevel.INNER_CIRCLE,
            live_window_start='22:00',
            live_window_end='02:00',
        )
        rule.id = 7
        rule.times_triggered = 3
        return rule

    def test_partial_edit_keeps_identity_and_statistics(self, rule):
        revised = rule.revise({'threshold': 75_000, 'name': '  Bigger night '})

        assert revised.threshold == 75_000
        assert revised.name == 'Bigger night'
        assert revised.live_window_start == '22:00'
        assert (revised.id, revised.times_triggered, revised.is_active) == (7, 3, True)
        assert rule.threshold == 50_000

    def test_window_can_be_cleared_as_a_pair(self, rule):
        revised = rule.revise({'live_window_start': None, 'live_window_end': None})

        assert revised.live_window is None

    @pytest.mark.parametrize(
        'changes',
        [
            {'threshold': 0},
            {'threshold': None},
            {'name': ' '},
            {'live_window_end': None},
            {'live_window_start': '25:00'},
            {'window_days': 0},
            {'venue_id': 2},
            {'times_triggered': 0},
        ],
    )
    def test_invalid_edits_are_rejected(self, rule, changes):
        with pytest.raises(DomainError):
            rule.revise(changes)
