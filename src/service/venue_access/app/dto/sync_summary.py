from datetime import datetime

import attrs

from src.service.venue_access.domain.enum.pos_provider import PosProvider


@attrs.define(frozen=True)
class SyncSummary:
    venue_id: int
    provider: PosProvider
    since: datetime
    cursor: datetime
    fetched: int = 0
    stored: int = 0
    deduplicated: int = 0
    malformed: int = 0
    new_grants: int = 0
