"""Shared test fixtures."""

import os

# Settings are read at import time; pin them before anything imports config
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402

from src.au_auction.engine.engine import AuctionEngine, EngineOptions  # noqa: E402
from src.au_bidding.infrastructure.memory import InMemoryBidLedger  # noqa: E402
from src.au_catalog.catalog import ListingCatalog  # noqa: E402
from src.au_common.clock import ManualClock  # noqa: E402
from src.au_listing.infrastructure.memory import InMemoryListingRepository  # noqa: E402

START = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(START)


@pytest.fixture
def engine(clock: ManualClock) -> AuctionEngine:
    return AuctionEngine(
        InMemoryListingRepository(),
        InMemoryBidLedger(),
        clock=clock,
        options=EngineOptions(max_duration_days=30),
    )


@pytest.fixture
def catalog(engine: AuctionEngine, clock: ManualClock) -> ListingCatalog:
    return ListingCatalog(engine.listings, clock=clock)
