"""
Bearer token decoding.

Tokens are issued by the identity service; this service only verifies the
signature and rebuilds the caller from its claims.
"""

from typing import Any, Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.shared_kernel.domain.entity.principal_entity import Principal, PrincipalRole


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise AuthenticationError('Invalid token') from e

    def get_principal_from_jwt(self, token: Optional[str]) -> Principal:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)

        user_id = payload.get('user_id')
        role = payload.get('role')
        if not isinstance(user_id, int) or role not in {r.value for r in PrincipalRole}:
            raise AuthenticationError('Invalid token')

        venue_ids = payload.get('venue_ids') or []
        if not isinstance(venue_ids, list) or not all(isinstance(v, int) for v in venue_ids):
            raise AuthenticationError('Invalid token')

        return Principal(id=user_id, role=PrincipalRole(role), venue_ids=venue_ids)
