from datetime import datetime
from typing import List

import attrs

from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier


@attrs.define(frozen=True)
class TierDraft:
    """Tier as submitted with a new event, before it has an id."""

    name: str
    price: int
    quantity: int
    sales_start: datetime
    sales_end: datetime


@attrs.define(frozen=True)
class EventDetail:
    event: Event
    tiers: List[TicketTier]
