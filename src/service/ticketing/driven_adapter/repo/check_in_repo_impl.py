"""
Check-in Repository Implementation

Redemption is a single guarded UPDATE plus the CheckInRecord insert in the
same transaction. Two scanners racing on one token both issue the UPDATE;
the database lets exactly one of them match ``status = 'active'``.
"""

from typing import AsyncContextManager, Callable, Optional

import attrs
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_check_in_repo import ICheckInRepo
from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord
from src.service.ticketing.domain.enum.guest_list_status import (
    PRE_CHECK_IN_STATUSES,
    GuestListStatus,
)
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.check_in_record_model import CheckInRecordModel
from src.service.ticketing.driven_adapter.model.guest_list_entry_model import GuestListEntryModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    check_in_record_model_to_entity,
)


class CheckInRepoImpl(ICheckInRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def redeem_ticket(self, *, record: CheckInRecord) -> Optional[CheckInRecord]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(TicketModel)
                .where(
                    TicketModel.id == record.ticket_id,
                    TicketModel.status == TicketStatus.ACTIVE.value,
                )
                .values(status=TicketStatus.REDEEMED.value, redeemed_at=record.checked_in_at)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            return await self._append_record(session=session, record=record)

    @Logger.io
    async def check_in_guest(self, *, record: CheckInRecord) -> Optional[CheckInRecord]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(GuestListEntryModel)
                .where(
                    GuestListEntryModel.id == record.guest_list_entry_id,
                    GuestListEntryModel.status.in_([s.value for s in PRE_CHECK_IN_STATUSES]),
                )
                .values(
                    status=GuestListStatus.CHECKED_IN.value,
                    checked_in_at=record.checked_in_at,
                    checked_in_by=record.staff_id,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                await session.rollback()
                return None

            return await self._append_record(session=session, record=record)

    @Logger.io
    async def get_by_ticket_id(self, *, ticket_id: int) -> Optional[CheckInRecord]:
        async with self.session_factory() as session:
            record_model = (
                await session.execute(
                    select(CheckInRecordModel).where(CheckInRecordModel.ticket_id == ticket_id)
                )
            ).scalar_one_or_none()
            return check_in_record_model_to_entity(record_model) if record_model else None

    @Logger.io
    async def get_by_guest_list_entry_id(
        self, *, guest_list_entry_id: int
    ) -> Optional[CheckInRecord]:
        async with self.session_factory() as session:
            record_model = (
                await session.execute(
                    select(CheckInRecordModel).where(
                        CheckInRecordModel.guest_list_entry_id == guest_list_entry_id
                    )
                )
            ).scalar_one_or_none()
            return check_in_record_model_to_entity(record_model) if record_model else None

    @staticmethod
    async def _append_record(*, session: AsyncSession, record: CheckInRecord) -> CheckInRecord:
        record_model = CheckInRecordModel(
            venue_id=record.venue_id,
            event_id=record.event_id,
            ticket_id=record.ticket_id,
            guest_list_entry_id=record.guest_list_entry_id,
            method=record.method.value,
            staff_id=record.staff_id,
            checked_in_at=record.checked_in_at,
        )
        session.add(record_model)
        await session.flush()
        record_id = record_model.id
        await session.commit()
        return attrs.evolve(record, id=record_id)
