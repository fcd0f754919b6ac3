"""Bid domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime

from src.au_common.enums import BidStatus


@dataclass
class Bid:
    id: str
    listing_id: str
    bidder_id: str
    amount: int  # minor units, > 0
    placed_at: datetime
    # Only field that changes after creation: ACTIVE -> WINNING -> OUTBID, any -> VOID
    status: BidStatus = BidStatus.ACTIVE

    @property
    def is_winning(self) -> bool:
        return self.status == BidStatus.WINNING

    @property
    def counts(self) -> bool:
        """Whether the bid still takes part in price discovery."""
        return self.status != BidStatus.VOID
