# src/au_listing/infrastructure/persistence.py
"""ListingRepository — raw SQL persistence implementation."""
from datetime import timedelta
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.au_common.database import storage_errors
from src.au_common.errors import ListingNotFoundError
from src.au_listing.domain.models import Listing

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_LISTING_SQL = text("""
    INSERT INTO listings (id, seller_id, title, description,
        base_price, reserve_price, is_auction,
        auction_end_time, auction_duration_seconds, created_at, updated_at)
    VALUES (:id, :seller_id, :title, :description,
        :base_price, :reserve_price, :is_auction,
        :auction_end_time, :auction_duration_seconds, :created_at, :updated_at)
""")

_UPDATE_LISTING_SQL = text("""
    UPDATE listings
    SET title = :title, description = :description,
        base_price = :base_price, reserve_price = :reserve_price,
        is_auction = :is_auction, auction_end_time = :auction_end_time,
        auction_duration_seconds = :auction_duration_seconds,
        updated_at = NOW()
    WHERE id = :id AND deleted_at IS NULL
""")

_SOFT_DELETE_SQL = text("""
    UPDATE listings SET deleted_at = NOW(), updated_at = NOW()
    WHERE id = :id AND deleted_at IS NULL
""")

_LOCK_LISTING_SQL = text("""
    SELECT id FROM listings WHERE id = :id AND deleted_at IS NULL FOR UPDATE
""")

_VOID_BIDS_SQL = text("""
    UPDATE bids SET status = 'VOID'
    WHERE listing_id = :id AND status <> 'VOID'
""")

_SELECT_COLUMNS = """
    id, seller_id, title, description, base_price, reserve_price,
    is_auction, auction_end_time, auction_duration_seconds, created_at, updated_at
"""

_GET_LISTING_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM listings WHERE id = :id AND deleted_at IS NULL
""")

_LIST_LISTINGS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM listings WHERE deleted_at IS NULL
    ORDER BY created_at DESC, id DESC
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_listing(row: Any) -> Listing:
    """Convert a DB result row to a Listing domain object."""
    duration = row.auction_duration_seconds
    return Listing(
        id=row.id,
        seller_id=row.seller_id,
        title=row.title,
        description=row.description,
        base_price=row.base_price,
        reserve_price=row.reserve_price,
        is_auction=row.is_auction,
        auction_end_time=row.auction_end_time,
        auction_duration=timedelta(seconds=duration) if duration is not None else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _listing_params(listing: Listing) -> dict[str, Any]:
    duration = listing.auction_duration
    return {
        "id": listing.id,
        "seller_id": listing.seller_id,
        "title": listing.title,
        "description": listing.description,
        "base_price": listing.base_price,
        "reserve_price": listing.reserve_price,
        "is_auction": listing.is_auction,
        "auction_end_time": listing.auction_end_time,
        "auction_duration_seconds": (
            int(duration.total_seconds()) if duration is not None else None
        ),
        "created_at": listing.created_at,
        "updated_at": listing.updated_at,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SqlListingRepository:
    """Concrete implementation of ListingRepositoryProtocol using raw SQL.

    Each call runs in its own short session; writes commit before returning.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, listing_id: str) -> Listing | None:
        with storage_errors("get listing"):
            async with self._session_factory() as db:
                result = await db.execute(_GET_LISTING_SQL, {"id": listing_id})
                row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def add(self, listing: Listing) -> None:
        with storage_errors("add listing"):
            async with self._session_factory.begin() as db:
                await db.execute(_INSERT_LISTING_SQL, _listing_params(listing))

    async def update(self, listing: Listing) -> None:
        with storage_errors("update listing"):
            async with self._session_factory.begin() as db:
                await db.execute(_UPDATE_LISTING_SQL, _listing_params(listing))

    async def delete(self, listing_id: str) -> None:
        with storage_errors("delete listing"):
            async with self._session_factory.begin() as db:
                await db.execute(_SOFT_DELETE_SQL, {"id": listing_id})

    async def list_listings(self) -> list[Listing]:
        with storage_errors("list listings"):
            async with self._session_factory() as db:
                result = await db.execute(_LIST_LISTINGS_SQL)
                rows = result.fetchall()
        return [_row_to_listing(row) for row in rows]


class SqlListingRemover:
    """ListingRemoverProtocol in one transaction.

    Voiding the bids and soft-deleting the listing commit together, so a
    failure can never leave a live listing whose winning bid is VOID.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def remove(self, listing_id: str) -> int:
        with storage_errors("remove listing"):
            async with self._session_factory.begin() as db:
                locked = await db.execute(_LOCK_LISTING_SQL, {"id": listing_id})
                if locked.fetchone() is None:
                    raise ListingNotFoundError(listing_id)
                voided = await db.execute(_VOID_BIDS_SQL, {"id": listing_id})
                await db.execute(_SOFT_DELETE_SQL, {"id": listing_id})
        return int(voided.rowcount or 0)
