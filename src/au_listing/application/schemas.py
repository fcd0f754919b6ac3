# src/au_listing/application/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from src.au_bidding.application.schemas import BidResponse
from src.au_common.enums import AuctionState, CatalogView, SaleType
from src.au_common.money import cents_to_display
from src.au_listing.domain.models import Listing


class CreateListingRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    sale_type: SaleType
    base_price: int = Field(ge=0, description="Minor units (cents)")
    reserve_price: int | None = Field(None, ge=0)
    auction_duration_days: int | None = None

    @model_validator(mode="after")
    def auction_fields_match_sale_type(self) -> "CreateListingRequest":
        if self.sale_type == SaleType.AUCTION and self.auction_duration_days is None:
            raise ValueError("auction_duration_days is required for auctions")
        if self.sale_type == SaleType.FIXED and (
            self.auction_duration_days is not None or self.reserve_price is not None
        ):
            raise ValueError("fixed-price listings take no auction duration or reserve price")
        return self


class UpdateListingRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    base_price: int | None = Field(None, ge=0)
    reserve_price: int | None = Field(None, ge=0)
    # Auctions only; a fixed-price listing rejects any reserve
    clear_reserve: bool = False

    @model_validator(mode="after")
    def reserve_set_or_cleared(self) -> "UpdateListingRequest":
        if self.clear_reserve and self.reserve_price is not None:
            raise ValueError("reserve_price and clear_reserve are mutually exclusive")
        return self


class RelistRequest(BaseModel):
    # None re-applies the originally chosen duration
    duration_days: int | None = None


class UpdateEndTimeRequest(BaseModel):
    auction_end_time: datetime

    @field_validator("auction_end_time")
    @classmethod
    def must_be_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("auction_end_time must include a timezone offset")
        return v


class ListingResponse(BaseModel):
    id: str
    seller_id: str
    title: str
    description: str | None
    base_price: int
    reserve_price: int | None
    is_auction: bool
    auction_end_time: datetime | None
    state: AuctionState
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, listing: Listing, state: AuctionState) -> "ListingResponse":
        return cls(
            id=listing.id,
            seller_id=listing.seller_id,
            title=listing.title,
            description=listing.description,
            base_price=listing.base_price,
            reserve_price=listing.reserve_price,
            is_auction=listing.is_auction,
            auction_end_time=listing.auction_end_time,
            state=state,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
        )


class ListingDetailResponse(BaseModel):
    listing: ListingResponse
    current_price: int
    current_price_display: str
    bid_count: int
    highest_bid: BidResponse | None

    @classmethod
    def build(
        cls,
        listing: ListingResponse,
        current_price: int,
        bid_count: int,
        highest_bid: BidResponse | None,
    ) -> "ListingDetailResponse":
        return cls(
            listing=listing,
            current_price=current_price,
            current_price_display=cents_to_display(current_price),
            bid_count=bid_count,
            highest_bid=highest_bid,
        )


class ListingListResponse(BaseModel):
    view: CatalogView
    items: list[ListingResponse]


class DeleteListingResponse(BaseModel):
    listing_id: str
    voided_bids: int
