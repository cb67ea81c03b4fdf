from enum import StrEnum
from typing import FrozenSet

import attrs

from src.platform.exception.exceptions import ForbiddenError


class PrincipalRole(StrEnum):
    CUSTOMER = 'customer'
    STAFF = 'staff'
    ADMIN = 'admin'


@attrs.define(frozen=True)
class Principal:
    """Already-authenticated caller, rebuilt from the bearer token claims (no DB lookup)."""

    id: int
    role: PrincipalRole
    venue_ids: FrozenSet[int] = attrs.field(factory=frozenset, converter=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == PrincipalRole.ADMIN

    def can_manage_venue(self, venue_id: int) -> bool:
        if self.is_admin:
            return True
        return self.role == PrincipalRole.STAFF and venue_id in self.venue_ids

    def ensure_can_manage_venue(self, venue_id: int) -> None:
        if not self.can_manage_venue(venue_id):
            raise ForbiddenError(f'Not staff of venue {venue_id}')
