from enum import StrEnum


class SyncStatus(StrEnum):
    NEVER = 'never'
    SUCCESS = 'success'
    FAILED = 'failed'


class IngestOutcome(StrEnum):
    STORED = 'STORED'
    DEDUPLICATED = 'DEDUPLICATED'
