from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import (
    get_current_principal,
    require_admin,
    require_staff,
)
from src.service.venue_access.app.command.manage_access_grant_use_case import (
    ManageAccessGrantUseCase,
)
from src.service.venue_access.app.query.list_access_grants_use_case import (
    ListAccessGrantsUseCase,
)
from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.driving_adapter.http_controller.schema.access_grant_schema import (
    AccessGrantCreateRequest,
    AccessGrantResponse,
)


router = APIRouter()


def _grant_response(grant: AccessGrant) -> AccessGrantResponse:
    if grant.id is None:
        raise ValueError('Access grant ID should not be None after creation.')
    return AccessGrantResponse(
        id=grant.id,
        user_id=grant.user_id,
        venue_id=grant.venue_id,
        tier=grant.tier.value,
        access_level=grant.access_level.value,
        unlocked_at=grant.unlocked_at,
        rule_id=grant.rule_id,
        granted_by=grant.granted_by,
        revoked_at=grant.revoked_at,
        revoked_by=grant.revoked_by,
        is_active=grant.is_active,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def grant_access(
    request: AccessGrantCreateRequest,
    staff: Principal = Depends(require_staff),
    use_case: ManageAccessGrantUseCase = Depends(ManageAccessGrantUseCase.depends),
) -> AccessGrantResponse:
    grant = await use_case.grant(
        principal=staff,
        user_id=request.user_id,
        venue_id=request.venue_id,
        tier=request.tier,
        access_level=request.access_level,
    )
    return _grant_response(grant)


@router.post('/{grant_id}/revoke')
@Logger.io
async def revoke_access(
    grant_id: int,
    admin: Principal = Depends(require_admin),
    use_case: ManageAccessGrantUseCase = Depends(ManageAccessGrantUseCase.depends),
) -> AccessGrantResponse:
    return _grant_response(await use_case.revoke(principal=admin, grant_id=grant_id))


@router.get('')
@Logger.io
async def list_access_grants(
    venue_id: Optional[int] = None,
    user_id: Optional[int] = None,
    include_revoked: bool = False,
    principal: Principal = Depends(get_current_principal),
    use_case: ListAccessGrantsUseCase = Depends(ListAccessGrantsUseCase.depends),
) -> List[AccessGrantResponse]:
    grants = await use_case.execute(
        principal=principal,
        venue_id=venue_id,
        user_id=principal.id if user_id is None and venue_id is None else user_id,
        include_revoked=include_revoked,
    )
    return [_grant_response(grant) for grant in grants]
