"""Listing domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass
class Listing:
    id: str
    seller_id: str
    title: str
    description: str | None
    base_price: int  # minor units; asking price for fixed-price, opening floor for auctions
    reserve_price: int | None = None
    is_auction: bool = False
    auction_end_time: datetime | None = None
    # Window the seller originally chose; relist re-applies it
    auction_duration: timedelta | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.is_auction and self.auction_end_time is not None:
            raise ValueError("A fixed-price listing cannot have an auction end time")
