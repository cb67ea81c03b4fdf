from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_access_grant_repo import IAccessGrantRepo
from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant


class ListAccessGrantsUseCase:
    def __init__(self, access_grant_repo: IAccessGrantRepo) -> None:
        self.access_grant_repo = access_grant_repo

    @classmethod
    @inject
    def depends(
        cls,
        access_grant_repo: IAccessGrantRepo = Depends(Provide[Container.access_grant_repo]),
    ) -> Self:
        return cls(access_grant_repo=access_grant_repo)

    @Logger.io
    async def execute(
        self,
        *,
        principal: Principal,
        venue_id: Optional[int] = None,
        user_id: Optional[int] = None,
        include_revoked: bool = False,
    ) -> List[AccessGrant]:
        # Anyone may list their own grants; other users' grants need venue staff
        if user_id != principal.id:
            if venue_id is None:
                if not principal.is_admin:
                    raise DomainError('venue_id is required to list other users\' grants')
            else:
                principal.ensure_can_manage_venue(venue_id)

        return await self.access_grant_repo.list_grants(
            venue_id=venue_id, user_id=user_id, include_revoked=include_revoked
        )
