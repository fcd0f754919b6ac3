# src/au_listing/infrastructure/db_models.py
"""SQLAlchemy ORM model for the listings table (DDL reference only — queries use raw SQL)."""
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.au_common.database import Base


class ListingORM(Base):
    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    seller_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_price: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    reserve_price: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    is_auction: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    auction_end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    auction_duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
