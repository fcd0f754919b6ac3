# src/au_bidding/application/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field

from src.au_bidding.domain.models import Bid
from src.au_common.enums import BidStatus


class PlaceBidRequest(BaseModel):
    amount: int = Field(gt=0, description="Minor units (cents)")


class BidResponse(BaseModel):
    id: str
    listing_id: str
    bidder_id: str
    amount: int
    placed_at: datetime
    status: BidStatus

    @classmethod
    def from_domain(cls, bid: Bid) -> "BidResponse":
        return cls(
            id=bid.id,
            listing_id=bid.listing_id,
            bidder_id=bid.bidder_id,
            amount=bid.amount,
            placed_at=bid.placed_at,
            status=bid.status,
        )


class BidListResponse(BaseModel):
    listing_id: str
    items: list[BidResponse]
    count: int
