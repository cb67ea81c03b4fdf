from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.ticket_tier_model import TicketTierModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    event_model_to_entity,
    tier_model_to_entity,
)


class EventRepoImpl(IEventRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create_with_tiers(
        self, *, event: Event, tiers: List[TicketTier]
    ) -> tuple[Event, List[TicketTier]]:
        async with self.session_factory() as session:
            event_model = EventModel(
                venue_id=event.venue_id,
                name=event.name,
                starts_at=event.starts_at,
                ends_at=event.ends_at,
                status=event.status.value,
                created_by=event.created_by,
            )
            session.add(event_model)
            await session.flush()

            tier_models = [
                TicketTierModel(
                    event_id=event_model.id,
                    name=tier.name,
                    price=tier.price,
                    quantity=tier.quantity,
                    sold=0,
                    sales_start=tier.sales_start,
                    sales_end=tier.sales_end,
                    version=0,
                )
                for tier in tiers
            ]
            session.add_all(tier_models)
            await session.commit()
            await session.refresh(event_model)

            return (
                event_model_to_entity(event_model),
                [tier_model_to_entity(model) for model in tier_models],
            )

    @Logger.io
    async def get_by_id(self, *, event_id: int) -> Optional[Event]:
        async with self.session_factory() as session:
            event_model = await session.get(EventModel, event_id)
            return event_model_to_entity(event_model) if event_model else None

    @Logger.io
    async def list_tiers(self, *, event_id: int) -> List[TicketTier]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketTierModel)
                .where(TicketTierModel.event_id == event_id)
                .order_by(TicketTierModel.id)
            )
            return [tier_model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def update_status(
        self, *, event_id: int, from_status: EventStatus, to_status: EventStatus
    ) -> Optional[Event]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(EventModel)
                .where(EventModel.id == event_id, EventModel.status == from_status.value)
                .values(status=to_status.value)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None

            event_model = (
                await session.execute(select(EventModel).where(EventModel.id == event_id))
            ).scalar_one()
            await session.commit()
            return event_model_to_entity(event_model)
