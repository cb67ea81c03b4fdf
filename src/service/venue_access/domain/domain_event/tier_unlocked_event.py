from datetime import datetime
from typing import ClassVar, Optional

import attrs

from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant


@attrs.define(frozen=True)
class TierUnlockedEvent:
    event_type: ClassVar[str] = 'tier_unlocked'

    venue_id: int
    user_id: int
    tier: str
    access_level: str
    rule_id: Optional[int]
    unlocked_at: datetime

    @classmethod
    def from_grant(cls, *, grant: AccessGrant) -> 'TierUnlockedEvent':
        return cls(
            venue_id=grant.venue_id,
            user_id=grant.user_id,
            tier=grant.tier.value,
            access_level=grant.access_level.value,
            rule_id=grant.rule_id,
            unlocked_at=grant.unlocked_at,
        )

    def to_dict(self) -> dict:
        return {
            'event_type': self.event_type,
            'venue_id': self.venue_id,
            'user_id': self.user_id,
            'tier': self.tier,
            'access_level': self.access_level,
            'rule_id': self.rule_id,
            'unlocked_at': self.unlocked_at.isoformat(),
        }
