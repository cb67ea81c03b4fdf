from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.app.interface.i_guest_list_repo import IGuestListRepo
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry


class AddGuestUseCase:
    def __init__(self, *, guest_list_repo: IGuestListRepo, event_repo: IEventRepo) -> None:
        self.guest_list_repo = guest_list_repo
        self.event_repo = event_repo

    @classmethod
    @inject
    def depends(
        cls,
        guest_list_repo: IGuestListRepo = Depends(Provide[Container.guest_list_repo]),
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
    ) -> Self:
        return cls(guest_list_repo=guest_list_repo, event_repo=event_repo)

    @Logger.io
    async def execute(
        self,
        *,
        principal: Principal,
        venue_id: int,
        event_id: Optional[int] = None,
        user_id: Optional[int] = None,
        guest_name: Optional[str] = None,
        guest_email: Optional[str] = None,
        guest_phone: Optional[str] = None,
        plus_ones: int = 0,
        is_vip: bool = False,
        notes: Optional[str] = None,
    ) -> GuestListEntry:
        principal.ensure_can_manage_venue(venue_id)

        if event_id is not None:
            event = await self.event_repo.get_by_id(event_id=event_id)
            if event is None:
                raise NotFoundError(f'Event {event_id} not found')
            if event.venue_id != venue_id:
                raise DomainError(f'Event {event_id} is not held at venue {venue_id}')

        entry = GuestListEntry.create(
            venue_id=venue_id,
            added_by=principal.id,
            event_id=event_id,
            user_id=user_id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
            plus_ones=plus_ones,
            is_vip=is_vip,
            notes=notes,
        )
        saved = await self.guest_list_repo.add(entry=entry)

        Logger.base.info(
            f'📋 [GUEST_LIST] Added entry {saved.id} to venue {venue_id} '
            f'(event={event_id}, party={saved.party_size}, vip={is_vip})'
        )
        return saved
