from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.event_detail import EventDetail
from src.service.ticketing.app.interface.i_event_repo import IEventRepo


class GetEventUseCase:
    def __init__(self, event_repo: IEventRepo) -> None:
        self.event_repo = event_repo

    @classmethod
    @inject
    def depends(
        cls,
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
    ) -> Self:
        return cls(event_repo=event_repo)

    @Logger.io
    async def execute(self, *, event_id: int) -> EventDetail:
        """Event with live tier counters (remaining = quantity - sold)."""
        Logger.base.info(f'🎫 [GET_EVENT] Loading event {event_id}')

        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            Logger.base.warning(f'⚠️ [GET_EVENT] Event {event_id} not found')
            raise NotFoundError(f'Event {event_id} not found')

        tiers = await self.event_repo.list_tiers(event_id=event_id)
        return EventDetail(event=event, tiers=tiers)
