from datetime import datetime
from typing import Any, Dict, List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import AwareDatetime

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import require_admin, require_staff
from src.service.venue_access.app.command.connect_pos_integration_use_case import (
    ConnectPosIntegrationUseCase,
)
from src.service.venue_access.app.command.disconnect_pos_integration_use_case import (
    DisconnectPosIntegrationUseCase,
)
from src.service.venue_access.app.command.ingest_pos_transaction_use_case import (
    IngestPosTransactionUseCase,
)
from src.service.venue_access.app.command.match_card_transactions_use_case import (
    MatchCardTransactionsUseCase,
)
from src.service.venue_access.app.command.sync_pos_transactions_use_case import (
    SyncPosTransactionsUseCase,
)
from src.service.venue_access.app.query.get_venue_revenue_use_case import GetVenueRevenueUseCase
from src.service.venue_access.app.query.list_pos_integrations_use_case import (
    ListPosIntegrationsUseCase,
)
from src.service.venue_access.app.query.list_pos_transactions_use_case import (
    MAX_PAGE_SIZE,
    ListPosTransactionsUseCase,
)
from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.driving_adapter.http_controller.schema.pos_schema import (
    AccessGrantSummary,
    CardLinkRequest,
    CardLinkResponse,
    IngestResponse,
    PosIntegrationConnectRequest,
    PosIntegrationResponse,
    PosTransactionPageResponse,
    PosTransactionResponse,
    SyncSummaryResponse,
    VenueRevenueResponse,
)


router = APIRouter()


def _transaction_response(transaction: PosTransaction) -> PosTransactionResponse:
    if transaction.id is None:
        raise ValueError('POS transaction ID should not be None after ingest.')
    return PosTransactionResponse(
        id=transaction.id,
        provider=transaction.provider.value,
        venue_id=transaction.venue_id,
        provider_txn_id=transaction.provider_txn_id,
        user_id=transaction.user_id,
        amount=transaction.amount,
        currency=transaction.currency,
        status=transaction.status.value,
        occurred_at=transaction.occurred_at,
    )


def _grant_summary(grant: AccessGrant) -> AccessGrantSummary:
    if grant.id is None:
        raise ValueError('Access grant ID should not be None after creation.')
    return AccessGrantSummary(
        id=grant.id,
        tier=grant.tier.value,
        access_level=grant.access_level.value,
        unlocked_at=grant.unlocked_at,
    )


def _integration_response(integration: PosIntegration) -> PosIntegrationResponse:
    if integration.id is None:
        raise ValueError('POS integration ID should not be None after creation.')
    return PosIntegrationResponse(
        id=integration.id,
        venue_id=integration.venue_id,
        provider=integration.provider.value,
        location_id=integration.location_id,
        is_active=integration.is_active,
        last_sync_at=integration.last_sync_at,
        last_sync_status=integration.last_sync_status.value,
        last_sync_error=integration.last_sync_error,
    )


@router.post('/{venue_id}/{provider}/webhook', status_code=status.HTTP_200_OK)
@inject
@Logger.io
async def receive_webhook(
    venue_id: int,
    provider: PosProvider,
    payload: Dict[str, Any] = Body(...),
    staff: Principal = Depends(require_staff),
    use_case: IngestPosTransactionUseCase = Depends(
        Provide[Container.ingest_pos_transaction_use_case]
    ),
) -> IngestResponse:
    result = await use_case.ingest_payload(
        provider=provider, venue_id=venue_id, payload=payload, principal=staff
    )
    return IngestResponse(
        outcome=result.outcome.value,
        transaction=_transaction_response(result.transaction),
        new_grants=[_grant_summary(grant) for grant in result.new_grants],
    )


@router.post('/{venue_id}/{provider}/sync')
@inject
@Logger.io
async def sync_transactions(
    venue_id: int,
    provider: PosProvider,
    staff: Principal = Depends(require_staff),
    use_case: SyncPosTransactionsUseCase = Depends(
        Provide[Container.sync_pos_transactions_use_case]
    ),
) -> SyncSummaryResponse:
    summary = await use_case.execute(venue_id=venue_id, provider=provider, principal=staff)
    return SyncSummaryResponse(
        venue_id=summary.venue_id,
        provider=summary.provider.value,
        since=summary.since,
        cursor=summary.cursor,
        fetched=summary.fetched,
        stored=summary.stored,
        deduplicated=summary.deduplicated,
        malformed=summary.malformed,
        new_grants=summary.new_grants,
    )


@router.post('/{venue_id}/integration', status_code=status.HTTP_201_CREATED)
@Logger.io
async def connect_integration(
    venue_id: int,
    request: PosIntegrationConnectRequest,
    staff: Principal = Depends(require_staff),
    use_case: ConnectPosIntegrationUseCase = Depends(ConnectPosIntegrationUseCase.depends),
) -> PosIntegrationResponse:
    integration = await use_case.execute(
        principal=staff,
        venue_id=venue_id,
        provider=request.provider,
        location_id=request.location_id,
    )
    return _integration_response(integration)


@router.get('/{venue_id}/integration')
@Logger.io
async def list_integrations(
    venue_id: int,
    staff: Principal = Depends(require_staff),
    use_case: ListPosIntegrationsUseCase = Depends(ListPosIntegrationsUseCase.depends),
) -> List[PosIntegrationResponse]:
    integrations = await use_case.execute(principal=staff, venue_id=venue_id)
    return [_integration_response(integration) for integration in integrations]


@router.post('/{venue_id}/{provider}/disconnect')
@Logger.io
async def disconnect_integration(
    venue_id: int,
    provider: PosProvider,
    staff: Principal = Depends(require_staff),
    use_case: DisconnectPosIntegrationUseCase = Depends(DisconnectPosIntegrationUseCase.depends),
) -> PosIntegrationResponse:
    integration = await use_case.execute(principal=staff, venue_id=venue_id, provider=provider)
    return _integration_response(integration)


@router.get('/{venue_id}/transaction')
@Logger.io
async def list_transactions(
    venue_id: int,
    transaction_status: Optional[PosTransactionStatus] = Query(default=None, alias='status'),
    since: Optional[AwareDatetime] = None,
    until: Optional[AwareDatetime] = None,
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    staff: Principal = Depends(require_staff),
    use_case: ListPosTransactionsUseCase = Depends(ListPosTransactionsUseCase.depends),
) -> PosTransactionPageResponse:
    page = await use_case.execute(
        principal=staff,
        venue_id=venue_id,
        status=transaction_status,
        since=since,
        until=until,
        limit=limit,
        offset=offset,
    )
    return PosTransactionPageResponse(
        transactions=[_transaction_response(t) for t in page.transactions],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        has_more=page.has_more,
    )


@router.post('/card_link')
@inject
@Logger.io
async def link_card(
    request: CardLinkRequest,
    _admin: Principal = Depends(require_admin),
    use_case: MatchCardTransactionsUseCase = Depends(
        Provide[Container.match_card_transactions_use_case]
    ),
) -> CardLinkResponse:
    matched = await use_case.execute(card_token=request.card_token, user_id=request.user_id)
    return CardLinkResponse(user_id=request.user_id, matched_transactions=matched)


@router.get('/{venue_id}/revenue')
@Logger.io
async def get_revenue(
    venue_id: int,
    since: Optional[datetime] = None,
    staff: Principal = Depends(require_staff),
    use_case: GetVenueRevenueUseCase = Depends(GetVenueRevenueUseCase.depends),
) -> VenueRevenueResponse:
    summary = await use_case.execute(principal=staff, venue_id=venue_id, since=since)
    return VenueRevenueResponse(
        venue_id=summary.venue_id,
        transaction_count=summary.transaction_count,
        total_amount=summary.total_amount,
        average_amount=summary.average_amount,
        since=summary.since,
    )
