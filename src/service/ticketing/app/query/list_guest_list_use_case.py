from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.interface.i_guest_list_repo import IGuestListRepo
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.enum.guest_list_status import GuestListStatus


class ListGuestListUseCase:
    def __init__(self, guest_list_repo: IGuestListRepo) -> None:
        self.guest_list_repo = guest_list_repo

    @classmethod
    @inject
    def depends(
        cls,
        guest_list_repo: IGuestListRepo = Depends(Provide[Container.guest_list_repo]),
    ) -> Self:
        return cls(guest_list_repo=guest_list_repo)

    @Logger.io
    async def execute(
        self,
        *,
        principal: Principal,
        venue_id: int,
        event_id: Optional[int] = None,
        status: Optional[GuestListStatus] = None,
    ) -> List[GuestListEntry]:
        principal.ensure_can_manage_venue(venue_id)
        return await self.guest_list_repo.list_entries(
            venue_id=venue_id, event_id=event_id, status=status
        )
