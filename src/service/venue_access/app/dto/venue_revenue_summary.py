from datetime import datetime
from typing import Optional

import attrs


@attrs.define(frozen=True)
class VenueRevenueSummary:
    """COMPLETED transactions only; amounts in minor units."""

    venue_id: int
    transaction_count: int
    total_amount: int
    since: Optional[datetime] = None

    @property
    def average_amount(self) -> int:
        if self.transaction_count == 0:
            return 0
        return self.total_amount // self.transaction_count
