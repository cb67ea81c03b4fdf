from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.interface.i_pos_integration_repo import IPosIntegrationRepo
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.sync_status import SyncStatus
from src.service.venue_access.driven_adapter.model.pos_integration_model import (
    PosIntegrationModel,
)
from src.service.venue_access.driven_adapter.repo.model_mapper import (
    pos_integration_model_to_entity,
)


_MAX_ERROR_LENGTH = 1000


class PosIntegrationRepoImpl(IPosIntegrationRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def upsert(self, *, integration: PosIntegration) -> PosIntegration:
        existing = await self.get(venue_id=integration.venue_id, provider=integration.provider)
        if existing is None:
            async with self.session_factory() as session:
                integration_model = PosIntegrationModel(
                    venue_id=integration.venue_id,
                    provider=integration.provider.value,
                    location_id=integration.location_id,
                    is_active=integration.is_active,
                    last_sync_status=SyncStatus.NEVER.value,
                )
                session.add(integration_model)
                try:
                    await session.commit()
                    await session.refresh(integration_model)
                    return pos_integration_model_to_entity(integration_model)
                except IntegrityError:
                    # Connected concurrently; fall through to the update
                    await session.rollback()

        async with self.session_factory() as session:
            await session.execute(
                update(PosIntegrationModel)
                .where(
                    PosIntegrationModel.venue_id == integration.venue_id,
                    PosIntegrationModel.provider == integration.provider.value,
                )
                .values(location_id=integration.location_id, is_active=integration.is_active)
                .execution_options(synchronize_session=False)
            )
            integration_model = (
                await session.execute(
                    select(PosIntegrationModel).where(
                        PosIntegrationModel.venue_id == integration.venue_id,
                        PosIntegrationModel.provider == integration.provider.value,
                    )
                )
            ).scalar_one()
            await session.commit()
            return pos_integration_model_to_entity(integration_model)

    @Logger.io
    async def deactivate(
        self, *, venue_id: int, provider: PosProvider
    ) -> Optional[PosIntegration]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(PosIntegrationModel)
                .where(
                    PosIntegrationModel.venue_id == venue_id,
                    PosIntegrationModel.provider == provider.value,
                )
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
        if result.rowcount == 0:
            return None
        return await self.get(venue_id=venue_id, provider=provider)

    @Logger.io
    async def get(self, *, venue_id: int, provider: PosProvider) -> Optional[PosIntegration]:
        async with self.session_factory() as session:
            integration_model = (
                await session.execute(
                    select(PosIntegrationModel).where(
                        PosIntegrationModel.venue_id == venue_id,
                        PosIntegrationModel.provider == provider.value,
                    )
                )
            ).scalar_one_or_none()
            return pos_integration_model_to_entity(integration_model) if integration_model else None

    @Logger.io
    async def list_by_venue(self, *, venue_id: int) -> List[PosIntegration]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PosIntegrationModel)
                .where(PosIntegrationModel.venue_id == venue_id)
                .order_by(PosIntegrationModel.provider)
            )
            return [pos_integration_model_to_entity(m) for m in result.scalars()]

    @Logger.io
    async def list_active(self) -> List[PosIntegration]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PosIntegrationModel)
                .where(PosIntegrationModel.is_active.is_(True))
                .order_by(PosIntegrationModel.id)
            )
            return [pos_integration_model_to_entity(m) for m in result.scalars()]

    @Logger.io
    async def record_success(self, *, integration_id: int, cursor: datetime) -> None:
        await self._update(
            integration_id=integration_id,
            last_sync_at=cursor,
            last_sync_status=SyncStatus.SUCCESS.value,
            last_sync_error=None,
        )

    @Logger.io
    async def record_failure(self, *, integration_id: int, error: str) -> None:
        await self._update(
            integration_id=integration_id,
            last_sync_status=SyncStatus.FAILED.value,
            last_sync_error=error[:_MAX_ERROR_LENGTH],
        )

    async def _update(self, *, integration_id: int, **values: object) -> None:
        async with self.session_factory() as session:
            await session.execute(
                update(PosIntegrationModel)
                .where(PosIntegrationModel.id == integration_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
