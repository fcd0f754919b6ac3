"""Integration-test fixtures.

Each test gets a fresh in-memory engine and catalog driven by a ManualClock,
wired into the app through FastAPI dependency overrides.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.au_auction.application.service import get_auction_engine, get_listing_catalog
from src.au_auction.engine.engine import AuctionEngine
from src.au_catalog.catalog import ListingCatalog
from src.main import app


@pytest_asyncio.fixture
async def client(engine: AuctionEngine, catalog: ListingCatalog) -> AsyncClient:  # type: ignore[override]
    app.dependency_overrides[get_auction_engine] = lambda: engine
    app.dependency_overrides[get_listing_catalog] = lambda: catalog
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

