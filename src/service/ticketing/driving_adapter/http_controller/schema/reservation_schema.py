from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from src.platform.types import UtilsUUID7
from src.service.ticketing.domain.entity.reservation_entity import MAX_TICKETS_PER_RESERVATION


class ReserveRequest(BaseModel):
    tier_id: int
    quantity: int = Field(default=1, ge=1, le=MAX_TICKETS_PER_RESERVATION)

    class Config:
        json_schema_extra = {'example': {'tier_id': 1, 'quantity': 2}}


class ReservationResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'tier_id': 1,
                'event_id': 1,
                'user_id': 42,
                'quantity': 2,
                'status': 'held',
                'expires_at': '2026-11-06T21:10:00+00:00',
            }
        },
    }

    id: UtilsUUID7
    tier_id: int
    event_id: int
    user_id: int
    quantity: int
    status: str
    expires_at: datetime


class IssuedTicketResponse(BaseModel):
    id: int
    event_id: int
    tier_id: int
    qr_token: str
    status: str


class ConfirmReservationResponse(BaseModel):
    reservation_id: UtilsUUID7
    tickets: List[IssuedTicketResponse]


class ReleaseReservationResponse(BaseModel):
    reservation_id: UtilsUUID7
    released: bool
