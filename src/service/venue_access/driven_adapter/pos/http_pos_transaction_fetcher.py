"""
HTTP POS Transaction Fetcher

Pulls one sync window from the provider's REST API with ``httpx.AsyncClient``
and normalizes every payment through the provider's normalizer.

- Square: ``GET /v2/payments`` paged by ``cursor``
- Toast: ``GET /orders/v2/ordersBulk`` paged by ``page``; orders → checks → payments

Timeouts, connection errors, 429 and 5xx raise TransientError so the sync
retries them; any other non-2xx raises UpstreamError and fails the sync.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import PosPayloadError, TransientError, UpstreamError
from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.dto.fetched_transactions import FetchedTransactions
from src.service.venue_access.app.interface.i_pos_payload_normalizer import IPosPayloadNormalizer
from src.service.venue_access.app.interface.i_pos_transaction_fetcher import (
    IPosTransactionFetcher,
)
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction


_TOAST_PAGE_SIZE = 100
_SQUARE_PAGE_LIMIT = 100


class HttpPosTransactionFetcher(IPosTransactionFetcher):
    def __init__(
        self,
        *,
        normalizers: Mapping[str, IPosPayloadNormalizer],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.normalizers = normalizers
        self.transport = transport

    @Logger.io
    async def fetch_transactions(
        self,
        *,
        provider: PosProvider,
        venue_id: int,
        location_id: str,
        since: datetime,
        until: datetime,
    ) -> FetchedTransactions:
        if provider == PosProvider.SQUARE:
            payloads = await self._fetch_square(location_id=location_id, since=since, until=until)
            malformed = 0
        else:
            payloads, malformed = await self._fetch_toast(
                location_id=location_id, since=since, until=until
            )

        normalizer = self.normalizers[provider]
        transactions: List[RawTransaction] = []
        for payload in payloads:
            try:
                transactions.append(normalizer.normalize(payload))
            except PosPayloadError as e:
                malformed += 1
                Logger.base.warning(
                    f'💳 [POS_FETCH] Skipping malformed {provider} item for venue {venue_id}: '
                    f'{e.message}'
                )

        Logger.base.info(
            f'💳 [POS_FETCH] Venue {venue_id} {provider} {since.isoformat()} → '
            f'{until.isoformat()}: {len(transactions)} ok, {malformed} malformed'
        )
        return FetchedTransactions(transactions=transactions, malformed=malformed)

    async def _fetch_square(
        self, *, location_id: str, since: datetime, until: datetime
    ) -> List[Dict[str, Any]]:
        headers = {
            'Authorization': f'Bearer {settings.SQUARE_ACCESS_TOKEN.get_secret_value()}',
            'Square-Version': settings.SQUARE_API_VERSION,
        }
        params: Dict[str, Any] = {
            'begin_time': since.isoformat(),
            'end_time': until.isoformat(),
            'location_id': location_id,
            'limit': _SQUARE_PAGE_LIMIT,
        }

        payments: List[Dict[str, Any]] = []
        async with self._client(base_url=settings.SQUARE_BASE_URL, headers=headers) as client:
            while True:
                body = await self._get_json(client, '/v2/payments', params=params)
                if not isinstance(body, dict):
                    raise UpstreamError('Square ListPayments did not return an object')
                page = body.get('payments') or []
                if not isinstance(page, list):
                    raise UpstreamError('Square ListPayments returned a non-list payments field')
                # Non-object items reach the normalizer and are counted as malformed there
                payments.extend(page)
                cursor = body.get('cursor')
                if not cursor:
                    return payments
                params = {**params, 'cursor': cursor}

    async def _fetch_toast(
        self, *, location_id: str, since: datetime, until: datetime
    ) -> Tuple[List[Any], int]:
        headers = {
            'Authorization': f'Bearer {settings.TOAST_ACCESS_TOKEN.get_secret_value()}',
            'Toast-Restaurant-External-ID': location_id,
        }

        payments: List[Any] = []
        malformed = 0
        page = 1
        async with self._client(base_url=settings.TOAST_BASE_URL, headers=headers) as client:
            while True:
                orders = await self._get_json(
                    client,
                    '/orders/v2/ordersBulk',
                    params={
                        'startDate': since.isoformat(),
                        'endDate': until.isoformat(),
                        'page': page,
                        'pageSize': _TOAST_PAGE_SIZE,
                    },
                )
                if not isinstance(orders, list):
                    raise UpstreamError('Toast ordersBulk did not return a list')

                page_payments, page_malformed = self._flatten_toast_orders(orders)
                payments.extend(page_payments)
                malformed += page_malformed
                if len(orders) < _TOAST_PAGE_SIZE:
                    return payments, malformed
                page += 1

    @staticmethod
    def _flatten_toast_orders(orders: List[Any]) -> Tuple[List[Dict[str, Any]], int]:
        """Orders → checks → payments; returns the payments and how many nodes were unusable."""
        payments: List[Dict[str, Any]] = []
        malformed = 0
        for order in orders:
            if not isinstance(order, Mapping):
                malformed += 1
                continue
            checks = order.get('checks') or []
            if not isinstance(checks, list):
                malformed += 1
                continue
            for check in checks:
                if not isinstance(check, Mapping):
                    malformed += 1
                    continue
                check_payments = check.get('payments') or []
                if not isinstance(check_payments, list):
                    malformed += 1
                    continue
                for payment in check_payments:
                    if not isinstance(payment, Mapping):
                        malformed += 1
                        continue
                    # The payment's own dates win over the check's and the order's
                    payments.append(
                        {
                            'closedDate': check.get('closedDate'),
                            'createdDate': order.get('createdDate'),
                            **payment,
                        }
                    )
        return payments, malformed

    def _client(self, *, base_url: str, headers: Dict[str, str]) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=settings.POS_SYNC_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    @staticmethod
    async def _get_json(client: httpx.AsyncClient, path: str, *, params: Dict[str, Any]) -> Any:
        try:
            response = await client.get(path, params=params)
        except httpx.TransportError as e:
            raise TransientError(f'POS request {path} failed: {type(e).__name__}') from e

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS or response.status_code >= 500:
            raise TransientError(f'POS request {path} returned {response.status_code}')
        if response.is_error:
            raise UpstreamError(f'POS request {path} returned {response.status_code}')

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f'POS request {path} returned invalid JSON') from e
