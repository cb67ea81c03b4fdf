from datetime import datetime
from typing import Optional

import attrs

from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier


@attrs.define
class AccessGrant:
    """
    One row per (user, venue, tier), enforced by a unique constraint.

    Revocation is soft: the row stays with ``revoked_at`` set, which is what
    stops the rule engine from granting the same tier again.
    """

    user_id: int
    venue_id: int
    tier: AccessTier
    access_level: AccessLevel
    unlocked_at: datetime
    rule_id: Optional[int] = None
    granted_by: Optional[int] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[int] = None
    id: Optional[int] = None

    @classmethod
    def from_rule(cls, *, rule: SpendRule, user_id: int, now: datetime) -> 'AccessGrant':
        return cls(
            user_id=user_id,
            venue_id=rule.venue_id,
            tier=rule.tier,
            access_level=rule.access_level,
            unlocked_at=now,
            rule_id=rule.id,
        )

    @classmethod
    def manual(
        cls,
        *,
        user_id: int,
        venue_id: int,
        tier: AccessTier,
        access_level: AccessLevel,
        granted_by: int,
        now: datetime,
    ) -> 'AccessGrant':
        return cls(
            user_id=user_id,
            venue_id=venue_id,
            tier=tier,
            access_level=access_level,
            unlocked_at=now,
            granted_by=granted_by,
        )

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None
