# tests/unit/test_lifecycle.py
"""Unit tests for the pure auction lifecycle functions."""
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from src.au_common.enums import AuctionState
from src.au_common.errors import (
    AuctionNotEndedError,
    AuctionNotOpenError,
    InvalidDurationError,
)
from src.au_listing.domain import lifecycle
from src.au_listing.domain.models import Listing

NOW = datetime(2026, 5, 1, 9, 30, tzinfo=UTC)


def _make_listing(**kwargs: Any) -> Listing:
    defaults: dict[str, Any] = {
        "id": "lst-1",
        "seller_id": "seller-1",
        "title": "Bike",
        "description": None,
        "base_price": 1000,
        "created_at": NOW - timedelta(days=3),
    }
    defaults.update(kwargs)
    return Listing(**defaults)


def _make_auction(end: datetime, **kwargs: Any) -> Listing:
    return _make_listing(
        is_auction=True,
        auction_end_time=end,
        auction_duration=kwargs.pop("duration", timedelta(days=7)),
        **kwargs,
    )


class TestListingModel:
    def test_fixed_price_rejects_end_time(self) -> None:
        with pytest.raises(ValueError):
            _make_listing(is_auction=False, auction_end_time=NOW)


class TestAuctionState:
    def test_fixed_price_is_not_auction(self) -> None:
        assert lifecycle.auction_state(_make_listing(), NOW) == AuctionState.NOT_AUCTION

    def test_open_before_end(self) -> None:
        listing = _make_auction(NOW + timedelta(seconds=1))
        assert lifecycle.auction_state(listing, NOW, winning_amount=5000) == AuctionState.OPEN

    def test_ended_exactly_at_end_time(self) -> None:
        listing = _make_auction(NOW)
        assert lifecycle.is_ended(listing, NOW)
        assert not lifecycle.is_open(listing, NOW)

    def test_sold_without_reserve(self) -> None:
        listing = _make_auction(NOW - timedelta(hours=1))
        assert lifecycle.auction_state(listing, NOW, winning_amount=1) == AuctionState.SOLD

    def test_unsold_without_bids(self) -> None:
        listing = _make_auction(NOW - timedelta(hours=1))
        assert lifecycle.auction_state(listing, NOW) == AuctionState.UNSOLD

    def test_reserve_is_inclusive(self) -> None:
        listing = _make_auction(NOW - timedelta(hours=1), reserve_price=2000)
        assert lifecycle.auction_state(listing, NOW, 1999) == AuctionState.UNSOLD
        assert lifecycle.auction_state(listing, NOW, 2000) == AuctionState.SOLD

    def test_state_read_does_not_mutate(self) -> None:
        listing = _make_auction(NOW - timedelta(hours=1))
        before = (listing.auction_end_time, listing.updated_at)
        lifecycle.auction_state(listing, NOW)
        assert (listing.auction_end_time, listing.updated_at) == before

    def test_is_ended_property(self) -> None:
        assert AuctionState.SOLD.is_ended
        assert AuctionState.UNSOLD.is_ended
        assert not AuctionState.OPEN.is_ended
        assert not AuctionState.NOT_AUCTION.is_ended


class TestDuration:
    @pytest.mark.parametrize("days", [0, -1])
    def test_non_positive_rejected(self, days: int) -> None:
        with pytest.raises(InvalidDurationError) as exc:
            lifecycle.duration_from_days(days)
        assert exc.value.code == 3002

    def test_max_enforced(self) -> None:
        with pytest.raises(InvalidDurationError):
            lifecycle.duration_from_days(31, max_days=30)
        assert lifecycle.duration_from_days(30, max_days=30) == timedelta(days=30)

    def test_open_auction_sets_end_and_duration(self) -> None:
        listing = _make_listing()
        lifecycle.open_auction(listing, timedelta(days=2), NOW)
        assert listing.is_auction
        assert listing.auction_end_time == NOW + timedelta(days=2)
        assert listing.auction_duration == timedelta(days=2)


class TestRelist:
    def test_reapplies_original_duration(self) -> None:
        listing = _make_auction(NOW - timedelta(days=10), duration=timedelta(days=5))
        lifecycle.relist(listing, NOW)
        assert listing.auction_end_time == NOW + timedelta(days=5)
        assert listing.auction_end_time > NOW

    def test_explicit_duration_overrides(self) -> None:
        listing = _make_auction(NOW - timedelta(days=1), duration=timedelta(days=5))
        lifecycle.relist(listing, NOW, timedelta(days=2))
        assert listing.auction_end_time == NOW + timedelta(days=2)

    def test_falls_back_to_end_minus_created(self) -> None:
        listing = _make_auction(
            NOW - timedelta(days=1), duration=None, created_at=NOW - timedelta(days=4)
        )
        lifecycle.relist(listing, NOW)
        assert listing.auction_end_time == NOW + timedelta(days=3)

    def test_open_auction_cannot_be_relisted(self) -> None:
        listing = _make_auction(NOW + timedelta(hours=1))
        with pytest.raises(AuctionNotEndedError):
            lifecycle.relist(listing, NOW)

    def test_fixed_price_cannot_be_relisted(self) -> None:
        with pytest.raises(AuctionNotEndedError):
            lifecycle.relist(_make_listing(), NOW)


class TestUpdateEndTime:
    def test_open_auction_end_moves(self) -> None:
        listing = _make_auction(NOW + timedelta(hours=1))
        lifecycle.update_end_time(listing, NOW + timedelta(days=2), NOW)
        assert listing.auction_end_time == NOW + timedelta(days=2)

    def test_ended_auction_rejected(self) -> None:
        listing = _make_auction(NOW - timedelta(hours=1))
        with pytest.raises(AuctionNotOpenError):
            lifecycle.update_end_time(listing, NOW + timedelta(days=1), NOW)

    def test_end_in_past_rejected(self) -> None:
        listing = _make_auction(NOW + timedelta(hours=1))
        with pytest.raises(InvalidDurationError):
            lifecycle.update_end_time(listing, NOW, NOW)

    def test_naive_datetime_rejected(self) -> None:
        listing = _make_auction(NOW + timedelta(hours=1))
        with pytest.raises(InvalidDurationError):
            lifecycle.update_end_time(listing, datetime(2030, 1, 1), NOW)
