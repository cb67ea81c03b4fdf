from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.ticketing.domain.enum.check_in_method import CheckInMethod


class TicketCheckInRequest(BaseModel):
    qr_token: str
    venue_id: int
    method: CheckInMethod = CheckInMethod.QR_CODE

    class Config:
        json_schema_extra = {
            'example': {'qr_token': 'Jd8f...base64url', 'venue_id': 1, 'method': 'qr_code'}
        }


class GuestCheckInRequest(BaseModel):
    venue_id: int


class CheckInRecordResponse(BaseModel):
    id: int
    venue_id: int
    event_id: Optional[int] = None
    ticket_id: Optional[int] = None
    guest_list_entry_id: Optional[int] = None
    method: str
    staff_id: int
    checked_in_at: datetime
