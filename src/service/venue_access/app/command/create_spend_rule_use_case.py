from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_spend_rule_repo import ISpendRuleRepo
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier


class CreateSpendRuleUseCase:
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
        self,
        *,
        principal: Principal,
        venue_id: int,
        name: str,
        threshold: int,
        tier: AccessTier,
        access_level: AccessLevel,
        description: Optional[str] = None,
        window_days: Optional[int] = None,
        live_window_start: Optional[str] = None,
        live_window_end: Optional[str] = None,
        timezone: str = 'UTC',
        priority: int = 0,
    ) -> SpendRule:
        principal.ensure_can_manage_venue(venue_id)

        rule = SpendRule.create(
            venue_id=venue_id,
            name=name,
            threshold=threshold,
            tier=tier,
            access_level=access_level,
            description=description,
            window_days=window_days,
            live_window_start=live_window_start,
            live_window_end=live_window_end,
            timezone=timezone,
            priority=priority,
        )
        saved = await self.spend_rule_repo.create(rule=rule)

        Logger.base.info(
            f'💎 [SPEND_RULE] Venue {venue_id} rule {saved.id} "{saved.name}": '
            f'{threshold} → {tier} (window={window_days}d, live={saved.live_window})'
        )
        return saved
