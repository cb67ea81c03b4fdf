"""
Inventory Ledger Repository Implementation

The only writer of ``ticket_tier.sold``. Each method is one transaction:
- reserve: compare-and-increment the tier, then insert the HELD reservation
- release: HELD → RELEASED/EXPIRED, then give the units back
- cancel_ticket: ACTIVE → CANCELLED, then give one unit back

The guard lives in the WHERE clause, so a lost race shows up as rowcount 0
and nothing is written.
"""

from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_inventory_ledger_repo import IInventoryLedgerRepo
from src.service.ticketing.domain.entity.reservation_entity import Reservation
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.reservation_model import ReservationModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_tier_model import TicketTierModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    reservation_model_to_entity,
    ticket_model_to_entity,
    tier_model_to_entity,
)


class InventoryLedgerRepoImpl(IInventoryLedgerRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_tier(self, *, tier_id: int) -> Optional[TicketTier]:
        async with self.session_factory() as session:
            tier_model = await session.get(TicketTierModel, tier_id)
            return tier_model_to_entity(tier_model) if tier_model else None

    @Logger.io
    async def reserve(self, *, reservation: Reservation) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                update(TicketTierModel)
                .where(
                    TicketTierModel.id == reservation.tier_id,
                    TicketTierModel.sold + reservation.quantity <= TicketTierModel.quantity,
                )
                .values(
                    sold=TicketTierModel.sold + reservation.quantity,
                    version=TicketTierModel.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return False

            session.add(
                ReservationModel(
                    id=str(reservation.id),
                    tier_id=reservation.tier_id,
                    event_id=reservation.event_id,
                    user_id=reservation.user_id,
                    quantity=reservation.quantity,
                    status=reservation.status.value,
                    expires_at=reservation.expires_at,
                    created_at=reservation.created_at,
                )
            )
            await session.commit()
            return True

    @Logger.io
    async def get_reservation(self, *, reservation_id: UUID) -> Optional[Reservation]:
        async with self.session_factory() as session:
            reservation_model = await session.get(ReservationModel, str(reservation_id))
            return reservation_model_to_entity(reservation_model) if reservation_model else None

    @Logger.io
    async def release(
        self, *, reservation_id: UUID, final_status: ReservationStatus
    ) -> Optional[Reservation]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(ReservationModel)
                .where(
                    ReservationModel.id == str(reservation_id),
                    ReservationModel.status == ReservationStatus.HELD.value,
                )
                .values(status=final_status.value)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            reservation_model = (
                await session.execute(
                    select(ReservationModel).where(ReservationModel.id == str(reservation_id))
                )
            ).scalar_one()
            await session.execute(
                update(TicketTierModel)
                .where(TicketTierModel.id == reservation_model.tier_id)
                .values(
                    sold=TicketTierModel.sold - reservation_model.quantity,
                    version=TicketTierModel.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return reservation_model_to_entity(reservation_model)

    @Logger.io
    async def list_expired_hold_ids(self, *, now: datetime, limit: int) -> List[UUID]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ReservationModel.id)
                .where(
                    ReservationModel.status == ReservationStatus.HELD.value,
                    ReservationModel.expires_at <= now,
                )
                .order_by(ReservationModel.expires_at)
                .limit(limit)
            )
            return [UUID(reservation_id) for reservation_id in result.scalars()]

    @Logger.io
    async def cancel_ticket(self, *, ticket_id: int, owner_id: int) -> Optional[Ticket]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(TicketModel)
                .where(
                    TicketModel.id == ticket_id,
                    TicketModel.owner_id == owner_id,
                    TicketModel.status == TicketStatus.ACTIVE.value,
                )
                .values(status=TicketStatus.CANCELLED.value)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            ticket_model = (
                await session.execute(select(TicketModel).where(TicketModel.id == ticket_id))
            ).scalar_one()
            await session.execute(
                update(TicketTierModel)
                .where(TicketTierModel.id == ticket_model.tier_id)
                .values(sold=TicketTierModel.sold - 1, version=TicketTierModel.version + 1)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return ticket_model_to_entity(ticket_model)
