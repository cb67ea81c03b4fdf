from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.event_status import EventStatus


class UpdateEventStatusUseCase:
    def __init__(self, *, event_repo: IEventRepo) -> None:
        self.event_repo = event_repo

    @classmethod
    @inject
    def depends(
        cls,
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
    ) -> Self:
        return cls(event_repo=event_repo)

    @Logger.io
    async def execute(
        self, *, principal: Principal, event_id: int, new_status: EventStatus
    ) -> Event:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')

        principal.ensure_can_manage_venue(event.venue_id)

        # Raises DomainError for backwards moves (live → upcoming, out of a terminal state)
        event.transition_to(new_status)

        updated = await self.event_repo.update_status(
            event_id=event_id, from_status=event.status, to_status=new_status
        )
        if updated is None:
            raise ConflictError(f'Event {event_id} status changed concurrently, reload and retry')

        Logger.base.info(f'🎪 [EVENT_STATUS] Event {event_id}: {event.status} → {new_status}')
        return updated
