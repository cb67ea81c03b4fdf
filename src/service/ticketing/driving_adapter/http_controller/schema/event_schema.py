from datetime import datetime
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, Field

from src.service.ticketing.domain.enum.event_status import EventStatus


class TierCreateRequest(BaseModel):
    name: str
    price: int = Field(ge=0, description='Minor currency units')
    quantity: int = Field(gt=0)
    sales_start: AwareDatetime
    sales_end: AwareDatetime


class EventCreateRequest(BaseModel):
    venue_id: int
    name: str
    starts_at: AwareDatetime
    ends_at: AwareDatetime
    tiers: List[TierCreateRequest] = Field(min_length=1)

    class Config:
        json_schema_extra = {
            'example': {
                'venue_id': 1,
                'name': 'Friday Night Techno',
                'starts_at': '2026-11-06T22:00:00+00:00',
                'ends_at': '2026-11-07T04:00:00+00:00',
                'tiers': [
                    {
                        'name': 'Early Bird',
                        'price': 1500,
                        'quantity': 100,
                        'sales_start': '2026-10-01T00:00:00+00:00',
                        'sales_end': '2026-11-06T22:00:00+00:00',
                    },
                    {
                        'name': 'VIP',
                        'price': 6000,
                        'quantity': 20,
                        'sales_start': '2026-10-01T00:00:00+00:00',
                        'sales_end': '2026-11-07T02:00:00+00:00',
                    },
                ],
            }
        }


class EventStatusUpdateRequest(BaseModel):
    status: EventStatus


class TierResponse(BaseModel):
    id: int
    event_id: int
    name: str
    price: int
    quantity: int
    sold: int
    remaining: int
    sales_start: datetime
    sales_end: datetime


class EventResponse(BaseModel):
    id: int
    venue_id: int
    name: str
    starts_at: datetime
    ends_at: datetime
    status: str
    created_by: int
    created_at: Optional[datetime] = None


class EventDetailResponse(EventResponse):
    tiers: List[TierResponse] = []
