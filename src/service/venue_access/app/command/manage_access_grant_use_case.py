"""
Manual access grants.

- grant: creates the row, or restores a revoked one; an active grant is a conflict
- revoke: admins only; soft, the row stays so the rule engine will not hand the tier back
"""

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.exception.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.venue_access.app.interface.i_access_grant_repo import IAccessGrantRepo
from src.service.venue_access.domain.domain_event.tier_unlocked_event import TierUnlockedEvent
from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier


class ManageAccessGrantUseCase:
    def __init__(
        self,
        *,
        access_grant_repo: IAccessGrantRepo,
        event_broadcaster: IInMemoryEventBroadcaster,
        clock: IClock,
    ) -> None:
        self.access_grant_repo = access_grant_repo
        self.event_broadcaster = event_broadcaster
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        access_grant_repo: IAccessGrantRepo = Depends(Provide[Container.access_grant_repo]),
        event_broadcaster: IInMemoryEventBroadcaster = Depends(
            Provide[Container.event_broadcaster]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            access_grant_repo=access_grant_repo, event_broadcaster=event_broadcaster, clock=clock
        )

    @Logger.io
    async def grant(
        self,
        *,
        principal: Principal,
        user_id: int,
        venue_id: int,
        tier: AccessTier,
        access_level: AccessLevel,
    ) -> AccessGrant:
        principal.ensure_can_manage_venue(venue_id)
        now = self.clock.now()

        existing = await self.access_grant_repo.get(user_id=user_id, venue_id=venue_id, tier=tier)
        if existing is None:
            granted = await self.access_grant_repo.try_create(
                grant=AccessGrant.manual(
                    user_id=user_id,
                    venue_id=venue_id,
                    tier=tier,
                    access_level=access_level,
                    granted_by=principal.id,
                    now=now,
                )
            )
            if granted is None:
                raise ConflictError(f'User {user_id} already holds {tier} at venue {venue_id}')
        elif existing.is_active:
            raise ConflictError(f'User {user_id} already holds {tier} at venue {venue_id}')
        else:
            assert existing.id is not None
            granted = await self.access_grant_repo.restore(
                grant_id=existing.id, access_level=access_level, granted_by=principal.id, now=now
            )
            if granted is None:
                raise ConflictError(f'Grant {existing.id} was restored concurrently')

        await self.event_broadcaster.broadcast(
            venue_id=venue_id, event_data=TierUnlockedEvent.from_grant(grant=granted).to_dict()
        )
        metrics.access_grants_created.labels(tier=tier.value, source='manual').inc()
        Logger.base.info(
            f'💎 [ACCESS_GRANT] {tier} granted to user {user_id} at venue {venue_id} '
            f'by {principal.id}'
        )
        return granted

    @Logger.io
    async def revoke(self, *, principal: Principal, grant_id: int) -> AccessGrant:
        if not principal.is_admin:
            raise ForbiddenError('Only admins can revoke access grants')
        existing = await self.access_grant_repo.get_by_id(grant_id=grant_id)
        if existing is None:
            raise NotFoundError(f'Access grant {grant_id} not found')
        if not existing.is_active:
            raise ConflictError(f'Access grant {grant_id} is already revoked')

        revoked = await self.access_grant_repo.revoke(
            grant_id=grant_id, revoked_by=principal.id, now=self.clock.now()
        )
        if revoked is None:
            raise ConflictError(f'Access grant {grant_id} is already revoked')

        Logger.base.info(
            f'💎 [ACCESS_GRANT] Grant {grant_id} ({existing.tier}) revoked by {principal.id}'
        )
        return revoked
