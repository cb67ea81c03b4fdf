"""Application layer DTOs"""

from src.service.venue_access.app.dto.fetched_transactions import FetchedTransactions
from src.service.venue_access.app.dto.ingest_result import IngestResult
from src.service.venue_access.app.dto.sync_summary import SyncSummary
from src.service.venue_access.app.dto.venue_revenue_summary import VenueRevenueSummary

__all__ = [
    'FetchedTransactions',
    'IngestResult',
    'SyncSummary',
    'VenueRevenueSummary',
]
