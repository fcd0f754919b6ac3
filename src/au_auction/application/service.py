# src/au_auction/application/service.py
"""Process-wide engine wiring.

The engine owns the per-listing locks, so exactly one instance must serve
a process; catalog and engine share the same repositories.
"""
import logging

from config.settings import settings
from src.au_auction.engine.engine import AuctionEngine, EngineOptions
from src.au_bidding.domain.ledger import BidLedgerProtocol
from src.au_bidding.infrastructure.memory import InMemoryBidLedger
from src.au_catalog.catalog import ListingCatalog
from src.au_common.clock import Clock
from src.au_listing.domain.repository import ListingRemoverProtocol, ListingRepositoryProtocol
from src.au_listing.infrastructure.memory import InMemoryListingRepository

logger = logging.getLogger(__name__)

_engine: AuctionEngine | None = None
_catalog: ListingCatalog | None = None


def _build_repositories() -> tuple[
    ListingRepositoryProtocol, BidLedgerProtocol, ListingRemoverProtocol | None
]:
    if settings.STORAGE_BACKEND == "postgres":
        from src.au_bidding.infrastructure.persistence import SqlBidLedger
        from src.au_common.database import get_session_factory
        from src.au_listing.infrastructure.persistence import (
            SqlListingRemover,
            SqlListingRepository,
        )

        factory = get_session_factory()
        return SqlListingRepository(factory), SqlBidLedger(factory), SqlListingRemover(factory)
    # None: the engine falls back to the in-memory remover
    return InMemoryListingRepository(), InMemoryBidLedger(), None


def engine_options_from_settings() -> EngineOptions:
    return EngineOptions(
        allow_self_outbid=settings.ALLOW_SELF_OUTBID,
        verify_invariants=settings.VERIFY_LEDGER_INVARIANTS,
        lock_timeout_seconds=settings.LOCK_TIMEOUT_SECONDS,
        max_duration_days=settings.MAX_AUCTION_DURATION_DAYS,
    )


def configure(clock: Clock | None = None) -> AuctionEngine:
    """(Re)build the process-wide engine and catalog."""
    global _engine, _catalog  # noqa: PLW0603
    listings, ledger, remover = _build_repositories()
    _engine = AuctionEngine(
        listings,
        ledger,
        clock=clock,
        options=engine_options_from_settings(),
        remover=remover,
    )
    _catalog = ListingCatalog(listings, clock=_engine.clock)
    logger.info("Auction engine configured: backend=%s", settings.STORAGE_BACKEND)
    return _engine


def get_auction_engine() -> AuctionEngine:
    if _engine is None:
        configure()
    assert _engine is not None
    return _engine


def get_listing_catalog() -> ListingCatalog:
    if _catalog is None:
        configure()
    assert _catalog is not None
    return _catalog
