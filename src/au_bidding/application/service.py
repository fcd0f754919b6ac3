# src/au_bidding/application/service.py
from src.au_auction.engine.engine import AuctionEngine
from src.au_bidding.application.schemas import BidListResponse, BidResponse, PlaceBidRequest


async def place_bid(
    listing_id: str, req: PlaceBidRequest, bidder_id: str, engine: AuctionEngine
) -> BidResponse:
    bid = await engine.place_bid(listing_id, bidder_id, req.amount)
    return BidResponse.from_domain(bid)


async def list_bids(listing_id: str, engine: AuctionEngine) -> BidListResponse:
    bids = await engine.bids_for(listing_id)
    return BidListResponse(
        listing_id=listing_id,
        items=[BidResponse.from_domain(b) for b in bids],
        count=len(bids),
    )


async def get_highest_bid(listing_id: str, engine: AuctionEngine) -> BidResponse | None:
    bid = await engine.highest_bid(listing_id)
    return BidResponse.from_domain(bid) if bid is not None else None
