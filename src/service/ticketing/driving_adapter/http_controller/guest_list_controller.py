from typing import List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import require_staff
from src.service.ticketing.app.command.add_guest_use_case import AddGuestUseCase
from src.service.ticketing.app.command.change_guest_status_use_case import (
    ChangeGuestStatusUseCase,
)
from src.service.ticketing.app.command.reconcile_no_shows_use_case import ReconcileNoShowsUseCase
from src.service.ticketing.app.query.list_guest_list_use_case import ListGuestListUseCase
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.enum.guest_list_status import GuestListStatus
from src.service.ticketing.driving_adapter.http_controller.schema.guest_list_schema import (
    GuestAddRequest,
    GuestListEntryResponse,
    NoShowReconcileResponse,
)


router = APIRouter()


def _entry_response(entry: GuestListEntry) -> GuestListEntryResponse:
    if entry.id is None:
        raise ValueError('Guest list entry ID should not be None after creation.')
    return GuestListEntryResponse(
        id=entry.id,
        venue_id=entry.venue_id,
        event_id=entry.event_id,
        user_id=entry.user_id,
        guest_name=entry.guest_name,
        guest_email=entry.guest_email,
        guest_phone=entry.guest_phone,
        plus_ones=entry.plus_ones,
        party_size=entry.party_size,
        is_vip=entry.is_vip,
        notes=entry.notes,
        status=entry.status.value,
        added_by=entry.added_by,
        checked_in_at=entry.checked_in_at,
        checked_in_by=entry.checked_in_by,
        created_at=entry.created_at,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def add_guest(
    request: GuestAddRequest,
    staff: Principal = Depends(require_staff),
    use_case: AddGuestUseCase = Depends(AddGuestUseCase.depends),
) -> GuestListEntryResponse:
    entry = await use_case.execute(
        principal=staff,
        venue_id=request.venue_id,
        event_id=request.event_id,
        user_id=request.user_id,
        guest_name=request.guest_name,
        guest_email=request.guest_email,
        guest_phone=request.guest_phone,
        plus_ones=request.plus_ones,
        is_vip=request.is_vip,
        notes=request.notes,
    )
    return _entry_response(entry)


@router.get('/venue/{venue_id}')
@Logger.io
async def list_guest_list(
    venue_id: int,
    event_id: Optional[int] = None,
    entry_status: Optional[GuestListStatus] = None,
    staff: Principal = Depends(require_staff),
    use_case: ListGuestListUseCase = Depends(ListGuestListUseCase.depends),
) -> List[GuestListEntryResponse]:
    entries = await use_case.execute(
        principal=staff, venue_id=venue_id, event_id=event_id, status=entry_status
    )
    return [_entry_response(entry) for entry in entries]


@router.post('/{entry_id}/confirm')
@Logger.io
async def confirm_guest(
    entry_id: int,
    staff: Principal = Depends(require_staff),
    use_case: ChangeGuestStatusUseCase = Depends(ChangeGuestStatusUseCase.depends),
) -> GuestListEntryResponse:
    return _entry_response(await use_case.confirm(principal=staff, entry_id=entry_id))


@router.post('/{entry_id}/remove')
@Logger.io
async def remove_guest(
    entry_id: int,
    staff: Principal = Depends(require_staff),
    use_case: ChangeGuestStatusUseCase = Depends(ChangeGuestStatusUseCase.depends),
) -> GuestListEntryResponse:
    return _entry_response(await use_case.remove(principal=staff, entry_id=entry_id))


@router.post('/event/{event_id}/reconcile_no_shows')
@inject
@Logger.io
async def reconcile_no_shows(
    event_id: int,
    staff: Principal = Depends(require_staff),
    use_case: ReconcileNoShowsUseCase = Depends(Provide[Container.reconcile_no_shows_use_case]),
) -> NoShowReconcileResponse:
    marked = await use_case.execute(event_id=event_id, principal=staff)
    return NoShowReconcileResponse(event_id=event_id, marked_no_show=marked)
