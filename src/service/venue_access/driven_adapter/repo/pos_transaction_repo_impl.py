"""
POS Transaction Repository Implementation

Rows are append-only. The unique (provider, venue_id, provider_txn_id)
constraint is the dedup: a replay fails the insert instead of being looked up
first, so two deliveries of the same webhook can never both be stored.
"""

from collections import Counter
from datetime import datetime
from typing import AsyncContextManager, Callable, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.dto.pos_transaction_page import PosTransactionPage
from src.service.venue_access.app.dto.venue_revenue_summary import VenueRevenueSummary
from src.service.venue_access.app.interface.i_pos_transaction_repo import IPosTransactionRepo
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.driven_adapter.model.pos_transaction_model import (
    PosTransactionModel,
)
from src.service.venue_access.driven_adapter.repo.model_mapper import (
    pos_transaction_model_to_entity,
)


class PosTransactionRepoImpl(IPosTransactionRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def insert(self, *, transaction: PosTransaction) -> Optional[PosTransaction]:
        async with self.session_factory() as session:
            txn_model = PosTransactionModel(
                provider=transaction.provider.value,
                venue_id=transaction.venue_id,
                provider_txn_id=transaction.provider_txn_id,
                card_token=transaction.card_token,
                user_id=transaction.user_id,
                amount=transaction.amount,
                currency=transaction.currency,
                status=transaction.status.value,
                occurred_at=transaction.occurred_at,
                ingested_at=transaction.ingested_at,
            )
            session.add(txn_model)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return None

            return pos_transaction_model_to_entity(txn_model)

    @Logger.io
    async def get_by_provider_txn_id(
        self, *, provider: PosProvider, venue_id: int, provider_txn_id: str
    ) -> Optional[PosTransaction]:
        async with self.session_factory() as session:
            txn_model = (
                await session.execute(
                    select(PosTransactionModel).where(
                        PosTransactionModel.provider == provider.value,
                        PosTransactionModel.venue_id == venue_id,
                        PosTransactionModel.provider_txn_id == provider_txn_id,
                    )
                )
            ).scalar_one_or_none()
            return pos_transaction_model_to_entity(txn_model) if txn_model else None

    @Logger.io
    async def list_counting_for_user(
        self, *, user_id: int, venue_id: int, since: Optional[datetime] = None
    ) -> List[PosTransaction]:
        async with self.session_factory() as session:
            stmt = select(PosTransactionModel).where(
                PosTransactionModel.user_id == user_id,
                PosTransactionModel.venue_id == venue_id,
                PosTransactionModel.status == PosTransactionStatus.COMPLETED.value,
            )
            if since is not None:
                stmt = stmt.where(PosTransactionModel.occurred_at >= since)

            result = await session.execute(stmt.order_by(PosTransactionModel.occurred_at))
            return [pos_transaction_model_to_entity(m) for m in result.scalars()]

    @Logger.io
    async def assign_user_by_card_token(self, *, card_token: str, user_id: int) -> Dict[int, int]:
        async with self.session_factory() as session:
            unmatched = (
                await session.execute(
                    select(PosTransactionModel.id, PosTransactionModel.venue_id)
                    .where(
                        PosTransactionModel.card_token == card_token,
                        PosTransactionModel.user_id.is_(None),
                    )
                    .with_for_update()
                )
            ).all()
            if not unmatched:
                await session.rollback()
                return {}

            await session.execute(
                update(PosTransactionModel)
                .where(
                    PosTransactionModel.id.in_([row.id for row in unmatched]),
                    PosTransactionModel.user_id.is_(None),
                )
                .values(user_id=user_id)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return dict(Counter(row.venue_id for row in unmatched))

    @Logger.io
    async def list_by_venue(
        self,
        *,
        venue_id: int,
        status: Optional[PosTransactionStatus] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int,
        offset: int,
    ) -> PosTransactionPage:
        conditions = [PosTransactionModel.venue_id == venue_id]
        if status is not None:
            conditions.append(PosTransactionModel.status == status.value)
        if since is not None:
            conditions.append(PosTransactionModel.occurred_at >= since)
        if until is not None:
            conditions.append(PosTransactionModel.occurred_at <= until)

        async with self.session_factory() as session:
            total = (
                await session.execute(
                    select(func.count(PosTransactionModel.id)).where(*conditions)
                )
            ).scalar_one()
            result = await session.execute(
                select(PosTransactionModel)
                .where(*conditions)
                .order_by(PosTransactionModel.occurred_at.desc(), PosTransactionModel.id.desc())
                .limit(limit)
                .offset(offset)
            )
            return PosTransactionPage(
                transactions=[pos_transaction_model_to_entity(m) for m in result.scalars()],
                total=int(total),
                limit=limit,
                offset=offset,
            )

    @Logger.io
    async def summarize_revenue(
        self, *, venue_id: int, since: Optional[datetime] = None
    ) -> VenueRevenueSummary:
        async with self.session_factory() as session:
            stmt = select(
                func.count(PosTransactionModel.id),
                func.coalesce(func.sum(PosTransactionModel.amount), 0),
            ).where(
                PosTransactionModel.venue_id == venue_id,
                PosTransactionModel.status == PosTransactionStatus.COMPLETED.value,
            )
            if since is not None:
                stmt = stmt.where(PosTransactionModel.occurred_at >= since)

            count, total = (await session.execute(stmt)).one()
            return VenueRevenueSummary(
                venue_id=venue_id,
                transaction_count=int(count),
                total_amount=int(total),
                since=since,
            )
