from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime


class SpendRuleModel(Base):
    __tablename__ = 'spend_rule'
    __table_args__ = (
        CheckConstraint('threshold > 0', name='ck_spend_rule_threshold'),
        CheckConstraint(
            'window_days IS NULL OR window_days > 0', name='ck_spend_rule_window_days'
        ),
        CheckConstraint(
            '(live_window_start IS NULL) = (live_window_end IS NULL)',
            name='ck_spend_rule_live_window',
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    venue_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    threshold: Mapped[int] = mapped_column(Integer, nullable=False)
    window_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    live_window_start: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    live_window_end: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    timezone: Mapped[str] = mapped_column(String(64), default='UTC', nullable=False)
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    access_level: Mapped[str] = mapped_column(String(20), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    times_triggered: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_triggered_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, server_default=func.now(), nullable=False
    )
