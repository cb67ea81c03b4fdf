"""
Reservation endpoints.

The payment provider's callback drives ``confirm`` (issue tickets) and
``release`` (give the hold back); both act on a HELD reservation only.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from opentelemetry import trace

from src.platform.exception.exception_handlers import rejection_response
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import get_current_principal
from src.service.ticketing.app.command.issue_tickets_use_case import IssueTicketsUseCase
from src.service.ticketing.app.command.release_reservation_use_case import (
    ReleaseReservationUseCase,
)
from src.service.ticketing.app.command.reserve_tickets_use_case import ReserveTicketsUseCase
from src.service.ticketing.app.dto.reservation_outcome import ReservationRejected
from src.service.ticketing.driving_adapter.http_controller.schema.reservation_schema import (
    ConfirmReservationResponse,
    IssuedTicketResponse,
    ReleaseReservationResponse,
    ReservationResponse,
    ReserveRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED, response_model=ReservationResponse)
@Logger.io
async def reserve_tickets(
    request: ReserveRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: ReserveTicketsUseCase = Depends(ReserveTicketsUseCase.depends),
) -> ReservationResponse | JSONResponse:
    with tracer.start_as_current_span('controller.reserve_tickets') as span:
        span.set_attribute('tier_id', request.tier_id)
        span.set_attribute('quantity', request.quantity)

        outcome = await use_case.execute(
            user_id=principal.id, tier_id=request.tier_id, quantity=request.quantity
        )
        if isinstance(outcome, ReservationRejected):
            span.set_attribute('reservation.rejected', outcome.reason.value)
            return rejection_response(
                reason=outcome.reason.value,
                context={'tier_id': request.tier_id, 'quantity': request.quantity},
            )

        reservation = outcome.reservation
        span.set_attribute('reservation.id', str(reservation.id))
        return ReservationResponse(
            id=reservation.id,
            tier_id=reservation.tier_id,
            event_id=reservation.event_id,
            user_id=reservation.user_id,
            quantity=reservation.quantity,
            status=reservation.status.value,
            expires_at=reservation.expires_at,
        )


@router.post('/{reservation_id}/confirm')
@Logger.io
async def confirm_reservation(
    reservation_id: UtilsUUID7,
    principal: Principal = Depends(get_current_principal),
    use_case: IssueTicketsUseCase = Depends(IssueTicketsUseCase.depends),
) -> ConfirmReservationResponse:
    tickets = await use_case.execute(reservation_id=reservation_id, owner_id=principal.id)
    return ConfirmReservationResponse(
        reservation_id=reservation_id,
        tickets=[
            IssuedTicketResponse(
                id=ticket.id or 0,
                event_id=ticket.event_id,
                tier_id=ticket.tier_id,
                qr_token=ticket.qr_token,
                status=ticket.status.value,
            )
            for ticket in tickets
        ],
    )


@router.post('/{reservation_id}/release')
@Logger.io
async def release_reservation(
    reservation_id: UtilsUUID7,
    principal: Principal = Depends(get_current_principal),
    use_case: ReleaseReservationUseCase = Depends(ReleaseReservationUseCase.depends),
) -> ReleaseReservationResponse:
    released = await use_case.execute(principal=principal, reservation_id=reservation_id)
    return ReleaseReservationResponse(reservation_id=reservation_id, released=released)
