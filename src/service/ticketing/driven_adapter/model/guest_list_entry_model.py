from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime


class GuestListEntryModel(Base):
    __tablename__ = 'guest_list_entry'
    __table_args__ = (
        CheckConstraint('plus_ones >= 0 AND plus_ones <= 10', name='ck_guest_list_plus_ones'),
        CheckConstraint(
            'user_id IS NOT NULL OR guest_name IS NOT NULL', name='ck_guest_list_identity'
        ),
        Index('ix_guest_list_entry_event_status', 'event_id', 'status'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    venue_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    event_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    guest_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    guest_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    guest_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    plus_ones: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_vip: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False)
    added_by: Mapped[int] = mapped_column(Integer, nullable=False)
    checked_in_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    checked_in_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
