from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_pos_integration_repo import IPosIntegrationRepo
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration


class ListPosIntegrationsUseCase:
    def __init__(self, pos_integration_repo: IPosIntegrationRepo) -> None:
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
    async def execute(self, *, principal: Principal, venue_id: int) -> List[PosIntegration]:
        principal.ensure_can_manage_venue(venue_id)
        return await self.pos_integration_repo.list_by_venue(venue_id=venue_id)
