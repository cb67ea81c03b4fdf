from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.shared_kernel.domain.entity.principal_entity import Principal, PrincipalRole
from src.service.shared_kernel.driving_adapter.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Principal:
    return jwt_auth.get_principal_from_jwt(credentials.credentials if credentials else None)


async def require_staff(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Staff or admin; the venue itself is checked against the route's venue_id."""
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_staff',
        attributes={'principal.id': principal.id, 'principal.role': principal.role.value},
    ):
        if principal.role not in (PrincipalRole.STAFF, PrincipalRole.ADMIN):
            raise ForbiddenError('Only venue staff can perform this action')
        return principal


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise ForbiddenError('Only admins can perform this action')
    return principal
