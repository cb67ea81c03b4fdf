from datetime import datetime
from typing import AsyncContextManager, Callable, Collection, List, Optional

from sqlalchemy import exists, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_guest_list_repo import IGuestListRepo
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.guest_list_status import GuestListStatus
from src.service.ticketing.driven_adapter.model.check_in_record_model import CheckInRecordModel
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.guest_list_entry_model import GuestListEntryModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    guest_list_entry_model_to_entity,
)


class GuestListRepoImpl(IGuestListRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def add(self, *, entry: GuestListEntry) -> GuestListEntry:
        async with self.session_factory() as session:
            entry_model = GuestListEntryModel(
                venue_id=entry.venue_id,
                event_id=entry.event_id,
                user_id=entry.user_id,
                guest_name=entry.guest_name,
                guest_email=entry.guest_email,
                guest_phone=entry.guest_phone,
                plus_ones=entry.plus_ones,
                is_vip=entry.is_vip,
                notes=entry.notes,
                status=entry.status.value,
                added_by=entry.added_by,
            )
            session.add(entry_model)
            await session.commit()
            await session.refresh(entry_model)

            return guest_list_entry_model_to_entity(entry_model)

    @Logger.io
    async def get_by_id(self, *, entry_id: int) -> Optional[GuestListEntry]:
        async with self.session_factory() as session:
            entry_model = await session.get(GuestListEntryModel, entry_id)
            return guest_list_entry_model_to_entity(entry_model) if entry_model else None

    @Logger.io
    async def transition_status(
        self,
        *,
        entry_id: int,
        from_statuses: Collection[GuestListStatus],
        to_status: GuestListStatus,
    ) -> Optional[GuestListEntry]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(GuestListEntryModel)
                .where(
                    GuestListEntryModel.id == entry_id,
                    GuestListEntryModel.status.in_([s.value for s in from_statuses]),
                )
                .values(status=to_status.value)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            entry_model = (
                await session.execute(
                    select(GuestListEntryModel).where(GuestListEntryModel.id == entry_id)
                )
            ).scalar_one()
            await session.commit()
            return guest_list_entry_model_to_entity(entry_model)

    @Logger.io
    async def list_entries(
        self,
        *,
        venue_id: int,
        event_id: Optional[int] = None,
        status: Optional[GuestListStatus] = None,
    ) -> List[GuestListEntry]:
        async with self.session_factory() as session:
            stmt = select(GuestListEntryModel).where(GuestListEntryModel.venue_id == venue_id)
            if event_id is not None:
                stmt = stmt.where(GuestListEntryModel.event_id == event_id)
            if status is not None:
                stmt = stmt.where(GuestListEntryModel.status == status.value)

            # VIPs first, then in the order they were added
            result = await session.execute(
                stmt.order_by(GuestListEntryModel.is_vip.desc(), GuestListEntryModel.id)
            )
            return [guest_list_entry_model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def mark_no_shows(self, *, event_id: int, venue_id: int) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                update(GuestListEntryModel)
                .where(
                    GuestListEntryModel.event_id == event_id,
                    GuestListEntryModel.venue_id == venue_id,
                    GuestListEntryModel.status == GuestListStatus.CONFIRMED.value,
                    ~exists().where(
                        CheckInRecordModel.guest_list_entry_id == GuestListEntryModel.id
                    ),
                )
                .values(status=GuestListStatus.NO_SHOW.value)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount

    @Logger.io
    async def list_event_ids_pending_reconciliation(self, *, now: datetime) -> List[int]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(EventModel.id)
                .where(
                    or_(
                        EventModel.status == EventStatus.COMPLETED.value,
                        (EventModel.ends_at <= now)
                        & (EventModel.status != EventStatus.CANCELLED.value),
                    ),
                    exists().where(
                        GuestListEntryModel.event_id == EventModel.id,
                        GuestListEntryModel.status == GuestListStatus.CONFIRMED.value,
                    ),
                )
                .order_by(EventModel.id)
            )
            return list(result.scalars())
