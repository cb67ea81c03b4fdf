from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_pos_integration_repo import IPosIntegrationRepo
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.enum.pos_provider import PosProvider


class ConnectPosIntegrationUseCase:
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
        self, *, principal: Principal, venue_id: int, provider: PosProvider, location_id: str
    ) -> PosIntegration:
        principal.ensure_can_manage_venue(venue_id)
        if not location_id or not location_id.strip():
            raise DomainError('location_id is required')

        integration = await self.pos_integration_repo.upsert(
            integration=PosIntegration(
                venue_id=venue_id, provider=provider, location_id=location_id.strip()
            )
        )
        Logger.base.info(
            f'🔌 [POS] Venue {venue_id} connected to {provider} '
            f'location {integration.location_id}'
        )
        return integration
