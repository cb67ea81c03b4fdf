from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime


class CheckInRecordModel(Base):
    """Append-only. The unique subject columns make a second redemption fail at the database."""

    __tablename__ = 'check_in_record'
    __table_args__ = (
        CheckConstraint(
            '(ticket_id IS NULL) <> (guest_list_entry_id IS NULL)',
            name='ck_check_in_record_single_subject',
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    venue_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    event_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    ticket_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('ticket.id'), nullable=True, unique=True
    )
    guest_list_entry_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('guest_list_entry.id'), nullable=True, unique=True
    )
    method: Mapped[str] = mapped_column(String(20), nullable=False)
    staff_id: Mapped[int] = mapped_column(Integer, nullable=False)
    checked_in_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
