from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier


class AccessGrantCreateRequest(BaseModel):
    user_id: int
    venue_id: int
    tier: AccessTier
    access_level: AccessLevel


class AccessGrantResponse(BaseModel):
    id: int
    user_id: int
    venue_id: int
    tier: str
    access_level: str
    unlocked_at: datetime
    rule_id: Optional[int] = None
    granted_by: Optional[int] = None
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[int] = None
    is_active: bool
