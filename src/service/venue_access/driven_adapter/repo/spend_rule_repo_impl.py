from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.interface.i_spend_rule_repo import ISpendRuleRepo
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule
from src.service.venue_access.driven_adapter.model.spend_rule_model import SpendRuleModel
from src.service.venue_access.driven_adapter.repo.model_mapper import spend_rule_model_to_entity


class SpendRuleRepoImpl(ISpendRuleRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, rule: SpendRule) -> SpendRule:
        async with self.session_factory() as session:
            rule_model = SpendRuleModel(
                venue_id=rule.venue_id,
                name=rule.name,
                description=rule.description,
                threshold=rule.threshold,
                window_days=rule.window_days,
                live_window_start=rule.live_window_start,
                live_window_end=rule.live_window_end,
                timezone=rule.timezone,
                tier=rule.tier.value,
                access_level=rule.access_level.value,
                priority=rule.priority,
                is_active=rule.is_active,
            )
            session.add(rule_model)
            await session.commit()
            await session.refresh(rule_model)

            return spend_rule_model_to_entity(rule_model)

    @Logger.io
    async def get_by_id(self, *, rule_id: int) -> Optional[SpendRule]:
        async with self.session_factory() as session:
            rule_model = await session.get(SpendRuleModel, rule_id)
            return spend_rule_model_to_entity(rule_model) if rule_model else None

    @Logger.io
    async def list_by_venue(self, *, venue_id: int, active_only: bool = False) -> List[SpendRule]:
        async with self.session_factory() as session:
            stmt = select(SpendRuleModel).where(SpendRuleModel.venue_id == venue_id)
            if active_only:
                stmt = stmt.where(SpendRuleModel.is_active.is_(True))

            result = await session.execute(
                stmt.order_by(
                    SpendRuleModel.priority.desc(),
                    SpendRuleModel.threshold.asc(),
                    SpendRuleModel.id.asc(),
                )
            )
            return [spend_rule_model_to_entity(m) for m in result.scalars()]

    @Logger.io
    async def update(self, *, rule: SpendRule) -> Optional[SpendRule]:
        async with self.session_factory() as session:
            rule_model = await session.get(SpendRuleModel, rule.id)
            if rule_model is None:
                return None

            rule_model.name = rule.name
            rule_model.description = rule.description
            rule_model.threshold = rule.threshold
            rule_model.window_days = rule.window_days
            rule_model.live_window_start = rule.live_window_start
            rule_model.live_window_end = rule.live_window_end
            rule_model.timezone = rule.timezone
            rule_model.tier = rule.tier.value
            rule_model.access_level = rule.access_level.value
            rule_model.priority = rule.priority
            await session.commit()
            await session.refresh(rule_model)

            return spend_rule_model_to_entity(rule_model)

    @Logger.io
    async def set_active(self, *, rule_id: int, is_active: bool) -> Optional[SpendRule]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(SpendRuleModel)
                .where(SpendRuleModel.id == rule_id)
                .values(is_active=is_active)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            rule_model = (
                await session.execute(select(SpendRuleModel).where(SpendRuleModel.id == rule_id))
            ).scalar_one()
            await session.commit()
            return spend_rule_model_to_entity(rule_model)

    @Logger.io
    async def record_trigger(self, *, rule_id: int, now: datetime) -> None:
        async with self.session_factory() as session:
            await session.execute(
                update(SpendRuleModel)
                .where(SpendRuleModel.id == rule_id)
                .values(
                    times_triggered=SpendRuleModel.times_triggered + 1, last_triggered_at=now
                )
                .execution_options(synchronize_session=False)
            )
            await session.commit()
