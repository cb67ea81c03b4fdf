from typing import List

import attrs

from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.enum.sync_status import IngestOutcome


@attrs.define(frozen=True)
class IngestResult:
    """``transaction`` is the stored row, or the pre-existing one on DEDUPLICATED."""

    outcome: IngestOutcome
    transaction: PosTransaction
    new_grants: List[AccessGrant] = attrs.field(factory=list)
