from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.service.ticketing.domain.entity.guest_list_entry_entity import MAX_PLUS_ONES


class GuestAddRequest(BaseModel):
    venue_id: int
    event_id: Optional[int] = None
    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    plus_ones: int = Field(default=0, ge=0, le=MAX_PLUS_ONES)
    is_vip: bool = False
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            'example': {
                'venue_id': 1,
                'event_id': 3,
                'guest_name': 'Alex Chen',
                'plus_ones': 2,
                'is_vip': True,
                'notes': 'Friend of the DJ',
            }
        }


class GuestListEntryResponse(BaseModel):
    id: int
    venue_id: int
    event_id: Optional[int] = None
    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    plus_ones: int
    party_size: int
    is_vip: bool
    notes: Optional[str] = None
    status: str
    added_by: int
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[int] = None
    created_at: Optional[datetime] = None


class NoShowReconcileResponse(BaseModel):
    event_id: int
    marked_no_show: int
