from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime

if TYPE_CHECKING:
    from src.service.ticketing.driven_adapter.model.event_model import EventModel


class TicketTierModel(Base):
    __tablename__ = 'ticket_tier'
    __table_args__ = (
        # Last line of defence behind the guarded increment
        CheckConstraint('sold >= 0 AND sold <= quantity', name='ck_ticket_tier_sold_within_cap'),
        CheckConstraint('quantity > 0', name='ck_ticket_tier_quantity_positive'),
        CheckConstraint('price >= 0', name='ck_ticket_tier_price_non_negative'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('event.id'), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    sold: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sales_start: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    sales_end: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    event: Mapped['EventModel'] = relationship('EventModel', back_populates='tiers', lazy='noload')
