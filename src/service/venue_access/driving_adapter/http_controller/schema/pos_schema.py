from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.service.venue_access.domain.enum.pos_provider import PosProvider


class PosIntegrationConnectRequest(BaseModel):
    provider: PosProvider
    location_id: str

    class Config:
        json_schema_extra = {'example': {'provider': 'square', 'location_id': 'L8Z3Q9XKJ7'}}


class PosIntegrationResponse(BaseModel):
    id: int
    venue_id: int
    provider: str
    location_id: str
    is_active: bool
    last_sync_at: Optional[datetime] = None
    last_sync_status: str
    last_sync_error: Optional[str] = None


class PosTransactionResponse(BaseModel):
    id: int
    provider: str
    venue_id: int
    provider_txn_id: str
    user_id: Optional[int] = None
    amount: int
    currency: str
    status: str
    occurred_at: datetime


class PosTransactionPageResponse(BaseModel):
    transactions: List[PosTransactionResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class AccessGrantSummary(BaseModel):
    id: int
    tier: str
    access_level: str
    unlocked_at: datetime


class IngestResponse(BaseModel):
    outcome: str
    transaction: PosTransactionResponse
    new_grants: List[AccessGrantSummary] = []


class SyncSummaryResponse(BaseModel):
    venue_id: int
    provider: str
    since: datetime
    cursor: datetime
    fetched: int
    stored: int
    deduplicated: int
    malformed: int
    new_grants: int


class CardLinkRequest(BaseModel):
    card_token: str
    user_id: int


class CardLinkResponse(BaseModel):
    user_id: int
    matched_transactions: int


class VenueRevenueResponse(BaseModel):
    venue_id: int
    transaction_count: int
    total_amount: int
    average_amount: int
    since: Optional[datetime] = None
