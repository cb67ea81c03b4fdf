from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime


class ReservationModel(Base):
    __tablename__ = 'reservation'
    __table_args__ = (Index('ix_reservation_status_expires_at', 'status', 'expires_at'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7 text
    tier_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('ticket_tier.id'), nullable=False, index=True
    )
    event_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='held', nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
