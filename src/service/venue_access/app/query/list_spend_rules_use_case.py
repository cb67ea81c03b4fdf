from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_spend_rule_repo import ISpendRuleRepo
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule


class ListSpendRulesUseCase:
    def __init__(self, spend_rule_repo: ISpendRuleRepo) -> None:
        self.spend_rule_repo = spend_rule_repo

    @classmethod
    @inject
    def depends(
        cls,
        spend_rule_repo: ISpendRuleRepo = Depends(Provide[Container.spend_rule_repo]),
    ) -> Self:
        return cls(spend_rule_repo=spend_rule_repo)

    @Logger.io
    async def execute(
        self, *, principal: Principal, venue_id: int, active_only: bool = False
    ) -> List[SpendRule]:
        principal.ensure_can_manage_venue(venue_id)
        return await self.spend_rule_repo.list_by_venue(venue_id=venue_id, active_only=active_only)
