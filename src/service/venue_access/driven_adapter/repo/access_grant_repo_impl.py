"""
Access Grant Repository Implementation

UNIQUE(user_id, venue_id, tier) arbitrates concurrent evaluations: the second
insert for the same tier fails and is reported as "already held". Revoke and
restore are guarded UPDATEs on ``revoked_at`` so the row is never duplicated.
"""

from datetime import datetime
from typing import AsyncContextManager, Callable, List, Optional, Set

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.interface.i_access_grant_repo import IAccessGrantRepo
from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier
from src.service.venue_access.driven_adapter.model.access_grant_model import AccessGrantModel
from src.service.venue_access.driven_adapter.repo.model_mapper import access_grant_model_to_entity


class AccessGrantRepoImpl(IAccessGrantRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def try_create(self, *, grant: AccessGrant) -> Optional[AccessGrant]:
        async with self.session_factory() as session:
            grant_model = AccessGrantModel(
                user_id=grant.user_id,
                venue_id=grant.venue_id,
                tier=grant.tier.value,
                access_level=grant.access_level.value,
                unlocked_at=grant.unlocked_at,
                rule_id=grant.rule_id,
                granted_by=grant.granted_by,
            )
            session.add(grant_model)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return None

            return access_grant_model_to_entity(grant_model)

    @Logger.io
    async def get_by_id(self, *, grant_id: int) -> Optional[AccessGrant]:
        async with self.session_factory() as session:
            grant_model = await session.get(AccessGrantModel, grant_id)
            return access_grant_model_to_entity(grant_model) if grant_model else None

    @Logger.io
    async def get(self, *, user_id: int, venue_id: int, tier: AccessTier) -> Optional[AccessGrant]:
        async with self.session_factory() as session:
            grant_model = (
                await session.execute(
                    select(AccessGrantModel).where(
                        AccessGrantModel.user_id == user_id,
                        AccessGrantModel.venue_id == venue_id,
                        AccessGrantModel.tier == tier.value,
                    )
                )
            ).scalar_one_or_none()
            return access_grant_model_to_entity(grant_model) if grant_model else None

    @Logger.io
    async def list_held_tiers(self, *, user_id: int, venue_id: int) -> Set[AccessTier]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(AccessGrantModel.tier).where(
                    AccessGrantModel.user_id == user_id, AccessGrantModel.venue_id == venue_id
                )
            )
            return {AccessTier(tier) for tier in result.scalars()}

    @Logger.io
    async def restore(
        self, *, grant_id: int, access_level: AccessLevel, granted_by: int, now: datetime
    ) -> Optional[AccessGrant]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(AccessGrantModel)
                .where(AccessGrantModel.id == grant_id, AccessGrantModel.revoked_at.is_not(None))
                .values(
                    access_level=access_level.value,
                    granted_by=granted_by,
                    unlocked_at=now,
                    revoked_at=None,
                    revoked_by=None,
                )
                .execution_options(synchronize_session=False)
            )
            return await self._reload_if_changed(
                session=session, grant_id=grant_id, rowcount=result.rowcount
            )

    @Logger.io
    async def revoke(
        self, *, grant_id: int, revoked_by: int, now: datetime
    ) -> Optional[AccessGrant]:
        async with self.session_factory() as session:
            result = await session.execute(
                update(AccessGrantModel)
                .where(AccessGrantModel.id == grant_id, AccessGrantModel.revoked_at.is_(None))
                .values(revoked_at=now, revoked_by=revoked_by)
                .execution_options(synchronize_session=False)
            )
            return await self._reload_if_changed(
                session=session, grant_id=grant_id, rowcount=result.rowcount
            )

    @Logger.io
    async def list_grants(
        self,
        *,
        venue_id: Optional[int] = None,
        user_id: Optional[int] = None,
        include_revoked: bool = False,
    ) -> List[AccessGrant]:
        async with self.session_factory() as session:
            stmt = select(AccessGrantModel)
            if venue_id is not None:
                stmt = stmt.where(AccessGrantModel.venue_id == venue_id)
            if user_id is not None:
                stmt = stmt.where(AccessGrantModel.user_id == user_id)
            if not include_revoked:
                stmt = stmt.where(AccessGrantModel.revoked_at.is_(None))

            result = await session.execute(
                stmt.order_by(AccessGrantModel.unlocked_at.desc(), AccessGrantModel.id.desc())
            )
            return [access_grant_model_to_entity(m) for m in result.scalars()]

    @staticmethod
    async def _reload_if_changed(
        *, session: AsyncSession, grant_id: int, rowcount: int
    ) -> Optional[AccessGrant]:
        if rowcount != 1:
            await session.rollback()
            return None

        grant_model = (
            await session.execute(select(AccessGrantModel).where(AccessGrantModel.id == grant_id))
        ).scalar_one()
        await session.commit()
        return access_grant_model_to_entity(grant_model)
