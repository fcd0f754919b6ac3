# src/au_listing/application/service.py
"""Listing application service — thin composition over the engine and catalog.

Writes go through AuctionEngine (per-listing lock); catalog reads do not.
"""
from src.au_auction.engine.engine import AuctionEngine
from src.au_bidding.application.schemas import BidResponse
from src.au_catalog.catalog import ListingCatalog
from src.au_common.enums import CatalogView, SaleType
from src.au_common.errors import NotListingOwnerError
from src.au_listing.application.schemas import (
    CreateListingRequest,
    DeleteListingResponse,
    ListingDetailResponse,
    ListingListResponse,
    ListingResponse,
    RelistRequest,
    UpdateEndTimeRequest,
    UpdateListingRequest,
)
from src.au_listing.domain import lifecycle
from src.au_listing.domain.models import Listing


async def _to_response(listing: Listing, engine: AuctionEngine) -> ListingResponse:
    highest = await engine.ledger.highest_bid(listing.id) if listing.is_auction else None
    state = lifecycle.auction_state(
        listing, engine.clock.now(), highest.amount if highest else None
    )
    return ListingResponse.from_domain(listing, state)


async def _require_owner(listing_id: str, user_id: str, engine: AuctionEngine) -> None:
    listing = await engine.get_listing(listing_id)
    if listing.seller_id != user_id:
        raise NotListingOwnerError(listing_id)


async def create_listing(
    req: CreateListingRequest, seller_id: str, engine: AuctionEngine
) -> ListingResponse:
    if req.sale_type == SaleType.AUCTION:
        assert req.auction_duration_days is not None  # enforced by schema
        listing = await engine.create_auction(
            seller_id=seller_id,
            title=req.title,
            base_price=req.base_price,
            duration_days=req.auction_duration_days,
            reserve_price=req.reserve_price,
            description=req.description,
        )
    else:
        listing = await engine.create_listing(
            seller_id=seller_id,
            title=req.title,
            base_price=req.base_price,
            description=req.description,
        )
    return await _to_response(listing, engine)


async def list_listings(
    view: CatalogView, catalog: ListingCatalog, engine: AuctionEngine
) -> ListingListResponse:
    if view == CatalogView.ENDED:
        listings = await catalog.ended_auctions()
    else:
        listings = await catalog.active_listings()
    items = [await _to_response(listing, engine) for listing in listings]
    return ListingListResponse(view=view, items=items)


async def get_listing_detail(listing_id: str, engine: AuctionEngine) -> ListingDetailResponse:
    snap = await engine.snapshot(listing_id)
    return ListingDetailResponse.build(
        listing=ListingResponse.from_domain(snap.listing, snap.state),
        current_price=snap.current_price,
        bid_count=snap.bid_count,
        highest_bid=BidResponse.from_domain(snap.highest_bid) if snap.highest_bid else None,
    )


async def update_listing(
    listing_id: str, req: UpdateListingRequest, user_id: str, engine: AuctionEngine
) -> ListingResponse:
    await _require_owner(listing_id, user_id, engine)
    listing = await engine.update_listing(
        listing_id,
        title=req.title,
        description=req.description,
        base_price=req.base_price,
        reserve_price=req.reserve_price,
        clear_reserve=req.clear_reserve,
    )
    return await _to_response(listing, engine)


async def relist(
    listing_id: str, req: RelistRequest, user_id: str, engine: AuctionEngine
) -> ListingResponse:
    await _require_owner(listing_id, user_id, engine)
    listing = await engine.relist(listing_id, duration_days=req.duration_days)
    return await _to_response(listing, engine)


async def update_end_time(
    listing_id: str, req: UpdateEndTimeRequest, user_id: str, engine: AuctionEngine
) -> ListingResponse:
    await _require_owner(listing_id, user_id, engine)
    listing = await engine.update_end_time(listing_id, req.auction_end_time)
    return await _to_response(listing, engine)


async def delete_listing(
    listing_id: str, user_id: str, engine: AuctionEngine
) -> DeleteListingResponse:
    await _require_owner(listing_id, user_id, engine)
    voided = await engine.delete_listing(listing_id)
    return DeleteListingResponse(listing_id=listing_id, voided_bids=voided)
