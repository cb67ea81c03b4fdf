from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.dto.venue_revenue_summary import VenueRevenueSummary
from src.service.venue_access.app.interface.i_pos_transaction_repo import IPosTransactionRepo


class GetVenueRevenueUseCase:
    def __init__(self, pos_transaction_repo: IPosTransactionRepo) -> None:
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
        self, *, principal: Principal, venue_id: int, since: Optional[datetime] = None
    ) -> VenueRevenueSummary:
        principal.ensure_can_manage_venue(venue_id)
        return await self.pos_transaction_repo.summarize_revenue(venue_id=venue_id, since=since)
