from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('event.id'), nullable=False, index=True
    )
    tier_id: Mapped[int] = mapped_column(Integer, ForeignKey('ticket_tier.id'), nullable=False)
    reservation_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    qr_token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), default='active', nullable=False)
    purchased_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    redeemed_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    transferred_from: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    transferred_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
