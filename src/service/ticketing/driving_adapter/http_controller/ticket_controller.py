from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.platform.exception.exception_handlers import rejection_response
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import (
    get_current_principal,
    require_staff,
)
from src.service.ticketing.app.command.cancel_ticket_use_case import CancelTicketUseCase
from src.service.ticketing.app.command.transfer_ticket_use_case import TransferTicketUseCase
from src.service.ticketing.app.dto.transfer_outcome import TransferRejected
from src.service.ticketing.app.query.list_my_tickets_use_case import ListMyTicketsUseCase
from src.service.ticketing.app.query.validate_ticket_use_case import ValidateTicketUseCase
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.rejection_reason import CheckInRejectReason
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    TicketResponse,
    TicketValidationResponse,
    TransferRequest,
)


router = APIRouter()


def _ticket_response(ticket: Ticket) -> TicketResponse:
    if ticket.id is None:
        raise ValueError('Ticket ID should not be None after issue.')
    return TicketResponse(
        id=ticket.id,
        event_id=ticket.event_id,
        tier_id=ticket.tier_id,
        owner_id=ticket.owner_id,
        qr_token=ticket.qr_token,
        status=ticket.status.value,
        purchased_at=ticket.purchased_at,
        redeemed_at=ticket.redeemed_at,
        transferred_from=ticket.transferred_from,
        transferred_at=ticket.transferred_at,
    )


@router.get('/mine')
@Logger.io
async def list_my_tickets(
    principal: Principal = Depends(get_current_principal),
    use_case: ListMyTicketsUseCase = Depends(ListMyTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.execute(owner_id=principal.id)
    return [_ticket_response(ticket) for ticket in tickets]


@router.get('/validate/{qr_token}')
@Logger.io
async def validate_ticket(
    qr_token: str,
    staff: Principal = Depends(require_staff),
    use_case: ValidateTicketUseCase = Depends(ValidateTicketUseCase.depends),
) -> TicketValidationResponse:
    ref = await use_case.execute(qr_token=qr_token)
    if ref is None:
        return TicketValidationResponse(valid=False, reason=CheckInRejectReason.NOT_FOUND.value)

    rejection = ref.redemption_rejection()
    if rejection is None and not staff.can_manage_venue(ref.venue_id):
        rejection = CheckInRejectReason.WRONG_VENUE
    return TicketValidationResponse(
        valid=rejection is None,
        reason=rejection.value if rejection else None,
        ticket_id=ref.ticket_id,
        event_id=ref.event_id,
        venue_id=ref.venue_id,
        tier_name=ref.tier_name,
        status=ref.status.value,
    )


@router.post('/{ticket_id}/transfer', response_model=TicketResponse)
@Logger.io
async def transfer_ticket(
    ticket_id: int,
    request: TransferRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: TransferTicketUseCase = Depends(TransferTicketUseCase.depends),
) -> TicketResponse | JSONResponse:
    outcome = await use_case.execute(
        ticket_id=ticket_id, from_user_id=principal.id, to_user_id=request.to_user_id
    )
    if isinstance(outcome, TransferRejected):
        return rejection_response(reason=outcome.reason.value, context={'ticket_id': ticket_id})
    return _ticket_response(outcome.ticket)


@router.post('/{ticket_id}/cancel')
@Logger.io
async def cancel_ticket(
    ticket_id: int,
    principal: Principal = Depends(get_current_principal),
    use_case: CancelTicketUseCase = Depends(CancelTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(ticket_id=ticket_id, owner_id=principal.id)
    return _ticket_response(ticket)
