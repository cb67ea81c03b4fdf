from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.platform.exception.exception_handlers import rejection_response
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import require_staff
from src.service.ticketing.app.command.check_in_guest_use_case import CheckInGuestUseCase
from src.service.ticketing.app.command.check_in_ticket_use_case import CheckInTicketUseCase
from src.service.ticketing.app.dto.check_in_outcome import CheckedIn
from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord
from src.service.ticketing.driving_adapter.http_controller.schema.check_in_schema import (
    CheckInRecordResponse,
    GuestCheckInRequest,
    TicketCheckInRequest,
)


router = APIRouter()


def _record_response(record: CheckInRecord) -> CheckInRecordResponse:
    if record.id is None:
        raise ValueError('Check-in record ID should not be None after commit.')
    return CheckInRecordResponse(
        id=record.id,
        venue_id=record.venue_id,
        event_id=record.event_id,
        ticket_id=record.ticket_id,
        guest_list_entry_id=record.guest_list_entry_id,
        method=record.method.value,
        staff_id=record.staff_id,
        checked_in_at=record.checked_in_at,
    )


@router.post('/ticket', response_model=CheckInRecordResponse)
@Logger.io
async def check_in_ticket(
    request: TicketCheckInRequest,
    staff: Principal = Depends(require_staff),
    use_case: CheckInTicketUseCase = Depends(CheckInTicketUseCase.depends),
) -> CheckInRecordResponse | JSONResponse:
    outcome = await use_case.execute(
        qr_token=request.qr_token, venue_id=request.venue_id, staff=staff, method=request.method
    )
    if isinstance(outcome, CheckedIn):
        return _record_response(outcome.record)
    return rejection_response(reason=outcome.reason.value, context=outcome.context)


@router.post('/guest/{entry_id}', response_model=CheckInRecordResponse)
@Logger.io
async def check_in_guest(
    entry_id: int,
    request: GuestCheckInRequest,
    staff: Principal = Depends(require_staff),
    use_case: CheckInGuestUseCase = Depends(CheckInGuestUseCase.depends),
) -> CheckInRecordResponse | JSONResponse:
    outcome = await use_case.execute(entry_id=entry_id, venue_id=request.venue_id, staff=staff)
    if isinstance(outcome, CheckedIn):
        return _record_response(outcome.record)
    return rejection_response(reason=outcome.reason.value, context=outcome.context)
