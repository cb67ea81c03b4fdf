from datetime import datetime, timedelta
from typing import Optional

import attrs

from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.sync_status import SyncStatus


@attrs.define
class PosIntegration:
    venue_id: int
    provider: PosProvider
    location_id: str
    is_active: bool = True
    last_sync_at: Optional[datetime] = None  # cursor: only moves after a fully processed batch
    last_sync_status: SyncStatus = SyncStatus.NEVER
    last_sync_error: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def sync_since(self, *, now: datetime, initial_lookback: timedelta) -> datetime:
        return self.last_sync_at or now - initial_lookback
