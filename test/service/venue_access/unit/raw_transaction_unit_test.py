from datetime import datetime, timezone

import pytest

from src.platform.exception.exceptions import PosPayloadError
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction
from test.test_constants import CARD_TOKEN, CUSTOMER_ID, VENUE_ID


OCCURRED_AT = datetime(2026, 6, 1, 23, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestRawTransaction:
    def test_currency_is_upper_cased(self):
        raw = RawTransaction(
            provider_txn_id='sq-1',
            amount=1250,
            currency='usd',
            status=PosTransactionStatus.COMPLETED,
            occurred_at=OCCURRED_AT,
        )

        assert raw.currency == 'USD'

    @pytest.mark.parametrize(
        'overrides',
        [
            {'provider_txn_id': ''},
            {'amount': -1},
            {'amount': 12.5},
            {'amount': True},
            {'currency': 'US'},
            {'occurred_at': datetime(2026, 6, 1, 23, 0)},
        ],
    )
    def test_invalid_fields_raise_pos_payload_error(self, overrides):
        params = {
            'provider_txn_id': 'sq-1',
            'amount': 1250,
            'currency': 'USD',
            'status': PosTransactionStatus.COMPLETED,
            'occurred_at': OCCURRED_AT,
        }
        params.update(overrides)

        with pytest.raises(PosPayloadError):
            RawTransaction(**params)

    def test_card_token_is_hidden_from_repr(self):
        raw = RawTransaction(
            provider_txn_id='sq-1',
            amount=1250,
            currency='USD',
            status=PosTransactionStatus.COMPLETED,
            occurred_at=OCCURRED_AT,
            card_token=CARD_TOKEN,
        )

        assert CARD_TOKEN not in repr(raw)


@pytest.mark.unit
class TestPosTransactionFromRaw:
    def test_unmatched_transaction_does_not_count(self):
        raw = RawTransaction(
            provider_txn_id='sq-1',
            amount=1250,
            currency='USD',
            status=PosTransactionStatus.COMPLETED,
            occurred_at=OCCURRED_AT,
        )

        txn = PosTransaction.from_raw(
            provider=PosProvider.SQUARE, venue_id=VENUE_ID, raw=raw, user_id=None, now=OCCURRED_AT
        )

        assert txn.ingested_at == OCCURRED_AT
        assert not txn.counts_toward_spend

    def test_matched_completed_transaction_counts(self):
        raw = RawTransaction(
            provider_txn_id='sq-1',
            amount=1250,
            currency='USD',
            status=PosTransactionStatus.COMPLETED,
            occurred_at=OCCURRED_AT,
            card_token=CARD_TOKEN,
        )

        txn = PosTransaction.from_raw(
            provider=PosProvider.SQUARE,
            venue_id=VENUE_ID,
            raw=raw,
            user_id=CUSTOMER_ID,
            now=OCCURRED_AT,
        )

        assert txn.counts_toward_spend
        assert txn.card_token == CARD_TOKEN
