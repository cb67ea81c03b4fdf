from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.database.utc_datetime import UtcDateTime


class PosTransactionModel(Base):
    __tablename__ = 'pos_transaction'
    __table_args__ = (
        UniqueConstraint(
            'provider', 'venue_id', 'provider_txn_id', name='uq_pos_transaction_provider_txn'
        ),
        CheckConstraint('amount >= 0', name='ck_pos_transaction_amount'),
        Index('ix_pos_transaction_user_venue', 'user_id', 'venue_id', 'occurred_at'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    venue_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    provider_txn_id: Mapped[str] = mapped_column(String(128), nullable=False)
    card_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    ingested_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
