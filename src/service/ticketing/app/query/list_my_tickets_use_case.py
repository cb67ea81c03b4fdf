from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket


class ListMyTicketsUseCase:
    def __init__(self, ticket_repo: ITicketRepo) -> None:
        self.ticket_repo = ticket_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_repo: ITicketRepo = Depends(Provide[Container.ticket_repo]),
    ) -> Self:
        return cls(ticket_repo=ticket_repo)

    @Logger.io
    async def execute(self, *, owner_id: int) -> List[Ticket]:
        return await self.ticket_repo.list_by_owner(owner_id=owner_id)
