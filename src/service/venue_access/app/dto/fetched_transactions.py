from typing import List

import attrs

from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction


@attrs.define(frozen=True)
class FetchedTransactions:
    """One fetch window; ``malformed`` counts provider items the normalizer rejected."""

    transactions: List[RawTransaction] = attrs.field(factory=list)
    malformed: int = 0
