from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.value_object.ticket_ref import TicketRef


class ValidateTicketUseCase:
    """Pure token lookup for scanners; never redeems."""

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
    async def execute(self, *, qr_token: str) -> Optional[TicketRef]:
        return await self.ticket_repo.get_ref_by_token(qr_token=qr_token)
