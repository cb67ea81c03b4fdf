"""
Guest list status changes made by staff.

- confirm: PENDING → CONFIRMED
- remove:  PENDING/CONFIRMED → REMOVED

Anything else is a ConflictError. The repo re-checks the source status in
its UPDATE, so a concurrent door check-in cannot be overwritten.
"""

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.interface.i_guest_list_repo import IGuestListRepo
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.enum.guest_list_status import (
    PRE_CHECK_IN_STATUSES,
    GuestListStatus,
)


class ChangeGuestStatusUseCase:
    def __init__(self, *, guest_list_repo: IGuestListRepo) -> None:
        self.guest_list_repo = guest_list_repo

    @classmethod
    @inject
    def depends(
        cls,
        guest_list_repo: IGuestListRepo = Depends(Provide[Container.guest_list_repo]),
    ) -> Self:
        return cls(guest_list_repo=guest_list_repo)

    @Logger.io
    async def confirm(self, *, principal: Principal, entry_id: int) -> GuestListEntry:
        entry = await self._load(principal=principal, entry_id=entry_id)
        entry.confirm()

        updated = await self.guest_list_repo.transition_status(
            entry_id=entry_id,
            from_statuses=(GuestListStatus.PENDING,),
            to_status=GuestListStatus.CONFIRMED,
        )
        if updated is None:
            raise ConflictError(f'Guest list entry {entry_id} changed concurrently')

        Logger.base.info(f'📋 [GUEST_LIST] Entry {entry_id} confirmed by {principal.id}')
        return updated

    @Logger.io
    async def remove(self, *, principal: Principal, entry_id: int) -> GuestListEntry:
        entry = await self._load(principal=principal, entry_id=entry_id)
        entry.remove()

        updated = await self.guest_list_repo.transition_status(
            entry_id=entry_id,
            from_statuses=PRE_CHECK_IN_STATUSES,
            to_status=GuestListStatus.REMOVED,
        )
        if updated is None:
            raise ConflictError(f'Guest list entry {entry_id} changed concurrently')

        Logger.base.info(f'📋 [GUEST_LIST] Entry {entry_id} removed by {principal.id}')
        return updated

    async def _load(self, *, principal: Principal, entry_id: int) -> GuestListEntry:
        entry = await self.guest_list_repo.get_by_id(entry_id=entry_id)
        if entry is None:
            raise NotFoundError(f'Guest list entry {entry_id} not found')
        principal.ensure_can_manage_venue(entry.venue_id)
        return entry
