from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.dto.pos_transaction_page import PosTransactionPage
from src.service.venue_access.app.interface.i_pos_transaction_repo import IPosTransactionRepo
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus


MAX_PAGE_SIZE = 200


class ListPosTransactionsUseCase:
    def __init__(self, *, pos_transaction_repo: IPosTransactionRepo) -> None:
        self.pos_transaction_repo = pos_transaction_repo

    @classmethod
    @inject
    def depends(
        cls,
        pos_transaction_repo: IPosTransactionRepo = Depends(
            Provide[Container.pos_transaction_repo]
        ),
    ) -> Self:
        return cls(pos_transaction_repo=pos_transaction_repo)

    @Logger.io
    async def execute(
        self,
        *,
        principal: Principal,
        venue_id: int,
        status: Optional[PosTransactionStatus] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> PosTransactionPage:
        principal.ensure_can_manage_venue(venue_id)
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise DomainError(f'limit must be between 1 and {MAX_PAGE_SIZE}')
        if offset < 0:
            raise DomainError('offset must not be negative')
        if since is not None and until is not None and since > until:
            raise DomainError('since must not be after until')

        return await self.pos_transaction_repo.list_by_venue(
            venue_id=venue_id,
            status=status,
            since=since,
            until=until,
            limit=limit,
            offset=offset,
        )
