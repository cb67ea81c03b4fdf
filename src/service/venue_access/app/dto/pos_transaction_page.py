from typing import List

import attrs

from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction


@attrs.define(frozen=True)
class PosTransactionPage:
    """Newest first; ``total`` counts every row matching the filter, not just this page."""

    transactions: List[PosTransaction]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.total > self.offset + self.limit
