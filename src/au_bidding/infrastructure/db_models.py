# src/au_bidding/infrastructure/db_models.py
"""SQLAlchemy ORM model for the bids table (DDL reference only — queries use raw SQL)."""
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from src.au_common.database import Base


class BidORM(Base):
    __tablename__ = "bids"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    listing_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("listings.id"), nullable=False, index=True
    )
    bidder_id: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    placed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="ACTIVE")
