from enum import StrEnum


class PosTransactionStatus(StrEnum):
    """Only COMPLETED counts toward spend; everything else is kept for the audit trail."""

    COMPLETED = 'completed'
    PENDING = 'pending'
    FAILED = 'failed'
    REFUNDED = 'refunded'
