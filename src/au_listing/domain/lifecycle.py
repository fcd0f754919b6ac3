"""Auction lifecycle — pure functions over a Listing and "now".

State is never stored. Every read re-derives it from auction_end_time and
the clock, so there is no scheduler and no missed-tick failure mode:

    NOT_AUCTION                      (fixed-price, terminal)
    OPEN      -- now >= end -->      SOLD | UNSOLD
    SOLD/UNSOLD -- relist -->        OPEN

Mutating helpers (relist, update_end_time) only validate and rewrite the
listing in place; callers are responsible for holding the listing's lock
and persisting the result.
"""

from datetime import datetime, timedelta

from src.au_common.enums import AuctionState
from src.au_common.errors import (
    AuctionNotEndedError,
    AuctionNotOpenError,
    InvalidDurationError,
)
from src.au_listing.domain.models import Listing


def is_open(listing: Listing, now: datetime) -> bool:
    return (
        listing.is_auction
        and listing.auction_end_time is not None
        and listing.auction_end_time > now
    )


def is_ended(listing: Listing, now: datetime) -> bool:
    return listing.is_auction and not is_open(listing, now)


def auction_state(
    listing: Listing, now: datetime, winning_amount: int | None = None
) -> AuctionState:
    """Derive the lifecycle state.

    winning_amount is the current WINNING bid's amount (None when no bids);
    it only matters once the auction has ended, to decide SOLD vs UNSOLD.
    """
    if not listing.is_auction:
        return AuctionState.NOT_AUCTION
    if is_open(listing, now):
        return AuctionState.OPEN
    if winning_amount is None:
        return AuctionState.UNSOLD
    if listing.reserve_price is not None and winning_amount < listing.reserve_price:
        return AuctionState.UNSOLD
    return AuctionState.SOLD


def duration_from_days(duration_days: int, max_days: int | None = None) -> timedelta:
    if duration_days <= 0:
        raise InvalidDurationError(f"{duration_days} days; must be at least 1")
    if max_days is not None and duration_days > max_days:
        raise InvalidDurationError(f"{duration_days} days; must be at most {max_days}")
    return timedelta(days=duration_days)


def open_auction(listing: Listing, duration: timedelta, now: datetime) -> Listing:
    """Turn a listing into an auction ending `duration` from now."""
    listing.is_auction = True
    listing.auction_duration = duration
    listing.auction_end_time = now + duration
    listing.updated_at = now
    return listing


def original_duration(listing: Listing) -> timedelta:
    """The window the seller chose when the auction was created."""
    if listing.auction_duration is not None:
        return listing.auction_duration
    if listing.auction_end_time is not None and listing.created_at is not None:
        return listing.auction_end_time - listing.created_at
    raise InvalidDurationError(f"listing {listing.id} has no recorded auction duration")


def relist(
    listing: Listing, now: datetime, duration: timedelta | None = None
) -> Listing:
    """Re-open an ended auction for its original duration (or an explicit one)."""
    if not is_ended(listing, now):
        raise AuctionNotEndedError(listing.id)
    window = duration if duration is not None else original_duration(listing)
    if window <= timedelta(0):
        raise InvalidDurationError(f"relist window {window} is not positive")
    listing.auction_end_time = now + window
    listing.updated_at = now
    return listing


def update_end_time(listing: Listing, new_end_time: datetime, now: datetime) -> Listing:
    if not is_open(listing, now):
        raise AuctionNotOpenError(listing.id)
    if new_end_time.tzinfo is None:
        raise InvalidDurationError("end time must be timezone-aware")
    if new_end_time <= now:
        raise InvalidDurationError(f"end time {new_end_time.isoformat()} is not in the future")
    listing.auction_end_time = new_end_time
    listing.updated_at = now
    return listing
