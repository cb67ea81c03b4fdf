from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import require_staff
from src.service.ticketing.app.command.create_event_with_tiers_use_case import (
    CreateEventWithTiersUseCase,
)
from src.service.ticketing.app.command.update_event_status_use_case import (
    UpdateEventStatusUseCase,
)
from src.service.ticketing.app.dto.event_detail import EventDetail, TierDraft
from src.service.ticketing.app.query.get_event_use_case import GetEventUseCase
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier
from src.service.ticketing.driving_adapter.http_controller.schema.event_schema import (
    EventCreateRequest,
    EventDetailResponse,
    EventResponse,
    EventStatusUpdateRequest,
    TierResponse,
)


router = APIRouter()


def _event_response(event: Event) -> EventResponse:
    if event.id is None:
        raise ValueError('Event ID should not be None after creation.')
    return EventResponse(
        id=event.id,
        venue_id=event.venue_id,
        name=event.name,
        starts_at=event.starts_at,
        ends_at=event.ends_at,
        status=event.status.value,
        created_by=event.created_by,
        created_at=event.created_at,
    )


def _tier_response(tier: TicketTier) -> TierResponse:
    if tier.id is None or tier.event_id is None:
        raise ValueError('Tier should be persisted before it is returned.')
    return TierResponse(
        id=tier.id,
        event_id=tier.event_id,
        name=tier.name,
        price=tier.price,
        quantity=tier.quantity,
        sold=tier.sold,
        remaining=tier.remaining,
        sales_start=tier.sales_start,
        sales_end=tier.sales_end,
    )


def _event_detail_response(detail: EventDetail) -> EventDetailResponse:
    return EventDetailResponse(
        **_event_response(detail.event).model_dump(),
        tiers=[_tier_response(tier) for tier in detail.tiers],
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_event(
    request: EventCreateRequest,
    principal: Principal = Depends(require_staff),
    use_case: CreateEventWithTiersUseCase = Depends(CreateEventWithTiersUseCase.depends),
) -> EventDetailResponse:
    detail = await use_case.execute(
        principal=principal,
        venue_id=request.venue_id,
        name=request.name,
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        tiers=[
            TierDraft(
                name=tier.name,
                price=tier.price,
                quantity=tier.quantity,
                sales_start=tier.sales_start,
                sales_end=tier.sales_end,
            )
            for tier in request.tiers
        ],
    )
    return _event_detail_response(detail)


@router.get('/{event_id}')
@Logger.io
async def get_event(
    event_id: int,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventDetailResponse:
    return _event_detail_response(await use_case.execute(event_id=event_id))


@router.patch('/{event_id}/status')
@Logger.io
async def update_event_status(
    event_id: int,
    request: EventStatusUpdateRequest,
    principal: Principal = Depends(require_staff),
    use_case: UpdateEventStatusUseCase = Depends(UpdateEventStatusUseCase.depends),
) -> EventResponse:
    event = await use_case.execute(
        principal=principal, event_id=event_id, new_status=request.status
    )
    return _event_response(event)
