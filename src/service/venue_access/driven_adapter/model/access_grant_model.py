from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime


class AccessGrantModel(Base):
    __tablename__ = 'access_grant'
    __table_args__ = (
        UniqueConstraint('user_id', 'venue_id', 'tier', name='uq_access_grant_user_venue_tier'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    venue_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    access_level: Mapped[str] = mapped_column(String(20), nullable=False)
    unlocked_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    rule_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey('spend_rule.id'), nullable=True
    )
    granted_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)
    revoked_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
