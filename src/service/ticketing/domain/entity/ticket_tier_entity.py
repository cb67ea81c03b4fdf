from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError


@attrs.define
class TicketTier:
    event_id: Optional[int]  # assigned when the parent event is persisted
    name: str
    price: int  # minor currency units
    quantity: int  # immutable cap
    sales_start: datetime
    sales_end: datetime
    sold: int = 0
    version: int = 0
    id: Optional[int] = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        price: int,
        quantity: int,
        sales_start: datetime,
        sales_end: datetime,
        event_id: Optional[int] = None,
    ) -> 'TicketTier':
        if not name or not name.strip():
            raise DomainError('Tier name cannot be empty')
        if price < 0:
            raise DomainError('Tier price cannot be negative')
        if quantity <= 0:
            raise DomainError('Tier quantity must be positive')
        if sales_end <= sales_start:
            raise DomainError('Tier sales window must end after it starts')
        return cls(
            event_id=event_id,
            name=name.strip(),
            price=price,
            quantity=quantity,
            sales_start=sales_start,
            sales_end=sales_end,
        )

    @property
    def remaining(self) -> int:
        return self.quantity - self.sold

    def is_on_sale(self, *, now: datetime) -> bool:
        return self.sales_start <= now < self.sales_end
