from datetime import datetime
from typing import Optional

import attrs

from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction


@attrs.define(frozen=True)
class PosTransaction:
    """Immutable once stored; only ``user_id`` may be filled in later by a card match."""

    provider: PosProvider
    venue_id: int
    provider_txn_id: str
    amount: int
    currency: str
    status: PosTransactionStatus
    occurred_at: datetime
    card_token: Optional[str] = attrs.field(default=None, repr=False)
    user_id: Optional[int] = None
    ingested_at: Optional[datetime] = None
    id: Optional[int] = None

    @classmethod
    def from_raw(
        cls,
        *,
        provider: PosProvider,
        venue_id: int,
        raw: RawTransaction,
        user_id: Optional[int],
        now: datetime,
    ) -> 'PosTransaction':
        return cls(
            provider=provider,
            venue_id=venue_id,
            provider_txn_id=raw.provider_txn_id,
            amount=raw.amount,
            currency=raw.currency,
            status=raw.status,
            occurred_at=raw.occurred_at,
            card_token=raw.card_token,
            user_id=user_id,
            ingested_at=now,
        )

    @property
    def counts_toward_spend(self) -> bool:
        return self.user_id is not None and self.status == PosTransactionStatus.COMPLETED
