"""au_listing REST endpoints.

POST   /listings                         — create fixed-price listing or auction
GET    /listings?view=active|ended       — catalog
GET    /listings/{listing_id}            — detail (state, current price, bid count)
PATCH  /listings/{listing_id}            — edit (seller only)
DELETE /listings/{listing_id}            — delete, bids become VOID (seller only)
POST   /listings/{listing_id}/relist     — relist an ended auction (seller only)
PUT    /listings/{listing_id}/end-time   — move end time of an open auction (seller only)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.au_auction.application.service import get_auction_engine, get_listing_catalog
from src.au_auction.engine.engine import AuctionEngine
from src.au_catalog.catalog import ListingCatalog
from src.au_common.enums import CatalogView
from src.au_common.response import ApiResponse, success_response
from src.au_gateway.auth.dependencies import get_current_user_id
from src.au_listing.application import service as svc
from src.au_listing.application.schemas import (
    CreateListingRequest,
    RelistRequest,
    UpdateEndTimeRequest,
    UpdateListingRequest,
)

router = APIRouter(prefix="/listings", tags=["listings"])


@router.post("", status_code=201)
async def create_listing(
    req: CreateListingRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.create_listing(req, user_id, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.get("")
async def list_listings(
    request: Request,
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
    catalog: Annotated[ListingCatalog, Depends(get_listing_catalog)],
    view: CatalogView = Query(CatalogView.ACTIVE, description="active or ended"),
) -> ApiResponse:
    result = await svc.list_listings(view, catalog, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/{listing_id}")
async def get_listing(
    listing_id: str,
    request: Request,
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.get_listing_detail(listing_id, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.patch("/{listing_id}")
async def update_listing(
    listing_id: str,
    req: UpdateListingRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.update_listing(listing_id, req, user_id, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.delete("/{listing_id}")
async def delete_listing(
    listing_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.delete_listing(listing_id, user_id, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.post("/{listing_id}/relist")
async def relist(
    listing_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
    req: RelistRequest | None = None,
) -> ApiResponse:
    result = await svc.relist(listing_id, req or RelistRequest(), user_id, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.put("/{listing_id}/end-time")
async def update_end_time(
    listing_id: str,
    req: UpdateEndTimeRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.update_end_time(listing_id, req, user_id, engine)
    return success_response(result.model_dump(mode="json"), request)
