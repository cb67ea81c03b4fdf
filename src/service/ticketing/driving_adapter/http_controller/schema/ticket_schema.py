from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TicketResponse(BaseModel):
    id: int
    event_id: int
    tier_id: int
    owner_id: int
    qr_token: str
    status: str
    purchased_at: Optional[datetime] = None
    redeemed_at: Optional[datetime] = None
    transferred_from: Optional[int] = None
    transferred_at: Optional[datetime] = None


class TicketValidationResponse(BaseModel):
    """Read-only view of a token for the door; validating never redeems."""

    valid: bool
    reason: Optional[str] = None
    ticket_id: Optional[int] = None
    event_id: Optional[int] = None
    venue_id: Optional[int] = None
    tier_name: Optional[str] = None
    status: Optional[str] = None


class TransferRequest(BaseModel):
    to_user_id: int
