from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier


class SpendRuleCreateRequest(BaseModel):
    venue_id: int
    name: str
    description: Optional[str] = None
    threshold: int = Field(gt=0, description='Minor currency units')
    tier: AccessTier
    access_level: AccessLevel
    window_days: Optional[int] = Field(default=None, ge=1)
    live_window_start: Optional[str] = Field(default=None, pattern=r'^\d{2}:\d{2}$')
    live_window_end: Optional[str] = Field(default=None, pattern=r'^\d{2}:\d{2}$')
    timezone: str = 'UTC'
    priority: int = 0

    class Config:
        json_schema_extra = {
            'example': {
                'venue_id': 1,
                'name': 'Big night',
                'threshold': 50000,
                'tier': 'platinum',
                'access_level': 'inner_circle',
                'live_window_start': '22:00',
                'live_window_end': '02:00',
                'timezone': 'America/New_York',
                'priority': 10,
            }
        }


class SpendRuleUpdateRequest(BaseModel):
    """Only the fields present in the body change; send null to clear an optional one."""

    name: Optional[str] = None
    description: Optional[str] = None
    threshold: Optional[int] = Field(default=None, gt=0, description='Minor currency units')
    tier: Optional[AccessTier] = None
    access_level: Optional[AccessLevel] = None
    window_days: Optional[int] = Field(default=None, ge=1)
    live_window_start: Optional[str] = Field(default=None, pattern=r'^\d{2}:\d{2}$')
    live_window_end: Optional[str] = Field(default=None, pattern=r'^\d{2}:\d{2}$')
    timezone: Optional[str] = None
    priority: Optional[int] = None

    class Config:
        json_schema_extra = {'example': {'threshold': 75000, 'priority': 20}}


class SpendRuleToggleRequest(BaseModel):
    is_active: bool


class SpendRuleResponse(BaseModel):
    id: int
    venue_id: int
    name: str
    description: Optional[str] = None
    threshold: int
    tier: str
    access_level: str
    window_days: Optional[int] = None
    live_window_start: Optional[str] = None
    live_window_end: Optional[str] = None
    timezone: str
    priority: int
    is_active: bool
    times_triggered: int
    last_triggered_at: Optional[datetime] = None
