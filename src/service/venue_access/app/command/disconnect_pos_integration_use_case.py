from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_pos_integration_repo import IPosIntegrationRepo
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.enum.pos_provider import PosProvider


class DisconnectPosIntegrationUseCase:
    """
    Turns a venue's provider integration off.

    Syncing a disconnected integration is a DomainError and the periodic job
    skips it. Connecting again reactivates it and resumes from the kept cursor.
    Already-ingested transactions and grants are untouched.
    """

    def __init__(self, *, pos_integration_repo: IPosIntegrationRepo) -> None:
        self.pos_integration_repo = pos_integration_repo

    @classmethod
    @inject
    def depends(
        cls,
        pos_integration_repo: IPosIntegrationRepo = Depends(
            Provide[Container.pos_integration_repo]
        ),
    ) -> Self:
        return cls(pos_integration_repo=pos_integration_repo)

    @Logger.io
    async def execute(
        self, *, principal: Principal, venue_id: int, provider: PosProvider
    ) -> PosIntegration:
        principal.ensure_can_manage_venue(venue_id)

        integration = await self.pos_integration_repo.deactivate(
            venue_id=venue_id, provider=provider
        )
        if integration is None:
            raise NotFoundError(f'Venue {venue_id} has no {provider} integration')

        Logger.base.info(f'🔌 [POS] Venue {venue_id} disconnected from {provider}')
        return integration
