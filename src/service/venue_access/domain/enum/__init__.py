"""Venue Access Domain Enums"""

from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.enum.sync_status import IngestOutcome, SyncStatus

__all__ = [
    'AccessLevel',
    'AccessTier',
    'IngestOutcome',
    'PosProvider',
    'PosTransactionStatus',
    'SyncStatus',
]
