"""
Unit tests for HttpPosTransactionFetcher

Provider responses are served by ``httpx.MockTransport``; one unusable node in
a batch is counted as malformed and never costs the valid payments around it.
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from src.platform.exception.exceptions import TransientError, UpstreamError
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.driven_adapter.pos.http_pos_transaction_fetcher import (
    HttpPosTransactionFetcher,
)
from src.service.venue_access.driven_adapter.pos.square_payload_normalizer import (
    SquarePayloadNormalizer,
)
from src.service.venue_access.driven_adapter.pos.toast_payload_normalizer import (
    ToastPayloadNormalizer,
)
from test.test_constants import VENUE_ID


UNTIL = datetime(2026, 6, 2, tzinfo=timezone.utc)
SINCE = UNTIL - timedelta(days=1)


def _toast_payment(guid: str) -> dict:
    return {'guid': guid, 'amount': 10, 'paidDate': '2026-06-01T23:15:00.000+00:00'}


def _square_payment(payment_id: str) -> dict:
    return {
        'id': payment_id,
        'status': 'COMPLETED',
        'created_at': '2026-06-01T23:15:00.000Z',
        'amount_money': {'amount': 4500, 'currency': 'USD'},
    }


def _fetcher(handler) -> HttpPosTransactionFetcher:
    return HttpPosTransactionFetcher(
        normalizers={
            PosProvider.SQUARE: SquarePayloadNormalizer(),
            PosProvider.TOAST: ToastPayloadNormalizer(),
        },
        transport=httpx.MockTransport(handler),
    )


async def _fetch(fetcher: HttpPosTransactionFetcher, provider: PosProvider):
    return await fetcher.fetch_transactions(
        provider=provider, venue_id=VENUE_ID, location_id='LOC-1', since=SINCE, until=UNTIL
    )


@pytest.mark.unit
class TestToastFetch:
    async def test_garbage_check_does_not_abort_the_batch(self):
        orders = [
            {'checks': ['garbage']},
            {'checks': [{'payments': [_toast_payment('p1')]}]},
        ]
        fetcher = _fetcher(lambda request: httpx.Response(200, json=orders))

        fetched = await _fetch(fetcher, PosProvider.TOAST)

        assert [t.provider_txn_id for t in fetched.transactions] == ['p1']
        assert fetched.malformed == 1

    async def test_garbage_at_every_level_is_counted(self):
        orders = [
            'not-an-order',
            {'checks': 'not-a-list'},
            {'checks': [{'payments': 'not-a-list'}]},
            {'checks': [{'payments': [42, _toast_payment('p2'), {'guid': 'no-amount'}]}]},
        ]
        fetcher = _fetcher(lambda request: httpx.Response(200, json=orders))

        fetched = await _fetch(fetcher, PosProvider.TOAST)

        assert [t.provider_txn_id for t in fetched.transactions] == ['p2']
        # four bad nodes while flattening, one payment rejected by the normalizer
        assert fetched.malformed == 5

    async def test_non_list_body_is_upstream_error(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, json={'error': 'nope'}))

        with pytest.raises(UpstreamError):
            await _fetch(fetcher, PosProvider.TOAST)


@pytest.mark.unit
class TestSquareFetch:
    async def test_pages_follow_cursor(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get('cursor') == 'page-2':
                return httpx.Response(200, json={'payments': [_square_payment('sq-2')]})
            return httpx.Response(
                200, json={'payments': [_square_payment('sq-1'), 'junk'], 'cursor': 'page-2'}
            )

        fetched = await _fetch(_fetcher(handler), PosProvider.SQUARE)

        assert [t.provider_txn_id for t in fetched.transactions] == ['sq-1', 'sq-2']
        assert fetched.malformed == 1

    async def test_non_object_body_is_upstream_error(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, json=['not', 'an', 'object']))

        with pytest.raises(UpstreamError):
            await _fetch(fetcher, PosProvider.SQUARE)

    async def test_rate_limit_is_transient(self):
        fetcher = _fetcher(lambda request: httpx.Response(429))

        with pytest.raises(TransientError):
            await _fetch(fetcher, PosProvider.SQUARE)
