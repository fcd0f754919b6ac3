# src/au_bidding/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.au_auction.application.service import get_auction_engine
from src.au_auction.engine.engine import AuctionEngine
from src.au_bidding.application import service as svc
from src.au_bidding.application.schemas import PlaceBidRequest
from src.au_common.response import ApiResponse, success_response
from src.au_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/listings/{listing_id}/bids", tags=["bids"])


@router.post("", status_code=201)
async def place_bid(
    listing_id: str,
    req: PlaceBidRequest,
    request: Request,
    bidder_id: Annotated[str, Depends(get_current_user_id)],
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.place_bid(listing_id, req, bidder_id, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.get("")
async def list_bids(
    listing_id: str,
    request: Request,
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.list_bids(listing_id, engine)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/highest")
async def get_highest_bid(
    listing_id: str,
    request: Request,
    engine: Annotated[AuctionEngine, Depends(get_auction_engine)],
) -> ApiResponse:
    result = await svc.get_highest_bid(listing_id, engine)
    return success_response(result.model_dump(mode="json") if result else None, request)
