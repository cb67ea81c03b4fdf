from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.value_object.ticket_ref import TicketRef
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.reservation_model import ReservationModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_tier_model import TicketTierModel
from src.service.ticketing.driven_adapter.repo.model_mapper import ticket_model_to_entity


class TicketRepoImpl(ITicketRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def issue_for_reservation(
        self, *, reservation_id: UUID, owner_id: int, tickets: List[Ticket]
    ) -> Optional[List[Ticket]]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(ReservationModel)
                .where(
                    ReservationModel.id == str(reservation_id),
                    ReservationModel.user_id == owner_id,
                    ReservationModel.status == ReservationStatus.HELD.value,
                )
                .values(status=ReservationStatus.CONFIRMED.value)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            ticket_models = [
                TicketModel(
                    event_id=ticket.event_id,
                    tier_id=ticket.tier_id,
                    reservation_id=str(reservation_id),
                    owner_id=ticket.owner_id,
                    qr_token=ticket.qr_token,
                    status=ticket.status.value,
                    purchased_at=ticket.purchased_at,
                )
                for ticket in tickets
            ]
            session.add_all(ticket_models)
            await session.commit()

            return [ticket_model_to_entity(model) for model in ticket_models]

    @Logger.io
    async def get_by_id(self, *, ticket_id: int) -> Optional[Ticket]:
        async with self.session_factory() as session:
            ticket_model = await session.get(TicketModel, ticket_id)
            return ticket_model_to_entity(ticket_model) if ticket_model else None

    @Logger.io
    async def get_ref_by_token(self, *, qr_token: str) -> Optional[TicketRef]:
        async with self.session_factory() as session:
            row = (
                await session.execute(
                    select(TicketModel, TicketTierModel.name, EventModel.venue_id)
                    .join(TicketTierModel, TicketTierModel.id == TicketModel.tier_id)
                    .join(EventModel, EventModel.id == TicketModel.event_id)
                    .where(TicketModel.qr_token == qr_token)
                )
            ).one_or_none()

            if row is None:
                return None

            ticket_model, tier_name, venue_id = row
            return TicketRef(
                ticket_id=ticket_model.id,
                event_id=ticket_model.event_id,
                venue_id=venue_id,
                tier_id=ticket_model.tier_id,
                tier_name=tier_name,
                owner_id=ticket_model.owner_id,
                status=TicketStatus(ticket_model.status),
            )

    @Logger.io
    async def transfer(
        self, *, ticket_id: int, from_user_id: int, to_user_id: int, now: datetime
    ) -> Optional[Ticket]:
        async with self.session_factory() as session:
            # The token is not touched: the new owner walks in with the same QR code
            result = await session.execute(
                update(TicketModel)
                .where(
                    TicketModel.id == ticket_id,
                    TicketModel.owner_id == from_user_id,
                    TicketModel.status == TicketStatus.ACTIVE.value,
                )
                .values(owner_id=to_user_id, transferred_from=from_user_id, transferred_at=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            ticket_model = (
                await session.execute(select(TicketModel).where(TicketModel.id == ticket_id))
            ).scalar_one()
            await session.commit()
            return ticket_model_to_entity(ticket_model)

    @Logger.io
    async def list_by_owner(self, *, owner_id: int) -> List[Ticket]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.owner_id == owner_id)
                .order_by(TicketModel.purchased_at.desc(), TicketModel.id.desc())
            )
            return [ticket_model_to_entity(model) for model in result.scalars()]
