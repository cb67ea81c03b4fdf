from typing import Any, Mapping, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_spend_rule_repo import ISpendRuleRepo
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule


class UpdateSpendRuleUseCase:
    """Edits apply to future evaluations only; existing grants are never taken back."""

    def __init__(self, *, spend_rule_repo: ISpendRuleRepo) -> None:
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
        self, *, principal: Principal, rule_id: int, changes: Mapping[str, Any]
    ) -> SpendRule:
        rule = await self.spend_rule_repo.get_by_id(rule_id=rule_id)
        if rule is None:
            raise NotFoundError(f'Spend rule {rule_id} not found')
        principal.ensure_can_manage_venue(rule.venue_id)

        if not changes:
            return rule

        updated = await self.spend_rule_repo.update(rule=rule.revise(changes))
        if updated is None:
            raise NotFoundError(f'Spend rule {rule_id} not found')

        Logger.base.info(f'💎 [SPEND_RULE] Rule {rule_id} updated: {sorted(changes)}')
        return updated
