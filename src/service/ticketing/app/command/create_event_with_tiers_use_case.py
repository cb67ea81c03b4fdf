from datetime import datetime
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.dto.event_detail import EventDetail, TierDraft
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier


class CreateEventWithTiersUseCase:
    """
    Create an event and its ticket tiers in one transaction.

    Only staff of the venue (or an admin) may create events there.
    Tiers start with sold=0; the inventory ledger owns the counter afterwards.
    """

    def __init__(self, *, event_repo: IEventRepo) -> None:
        self.event_repo = event_repo

    @classmethod
    @inject
    def depends(
        cls,
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
    ) -> Self:
        return cls(event_repo=event_repo)

    @Logger.io
    async def execute(
        self,
        *,
        principal: Principal,
        venue_id: int,
        name: str,
        starts_at: datetime,
        ends_at: datetime,
        tiers: List[TierDraft],
    ) -> EventDetail:
        principal.ensure_can_manage_venue(venue_id)

        event = Event.create(
            venue_id=venue_id,
            name=name,
            starts_at=starts_at,
            ends_at=ends_at,
            created_by=principal.id,
        )
        tier_entities = [
            TicketTier.create(
                name=draft.name,
                price=draft.price,
                quantity=draft.quantity,
                sales_start=draft.sales_start,
                sales_end=draft.sales_end,
            )
            for draft in tiers
        ]

        saved_event, saved_tiers = await self.event_repo.create_with_tiers(
            event=event, tiers=tier_entities
        )

        Logger.base.info(
            f'🎪 [CREATE_EVENT] Event {saved_event.id} at venue {venue_id} '
            f'with {len(saved_tiers)} tiers ({sum(t.quantity for t in saved_tiers)} tickets)'
        )
        return EventDetail(event=saved_event, tiers=saved_tiers)
