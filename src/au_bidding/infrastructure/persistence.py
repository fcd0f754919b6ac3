# src/au_bidding/infrastructure/persistence.py
"""BidLedger — raw SQL persistence implementation."""
from dataclasses import replace
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.au_bidding.domain.models import Bid
from src.au_common.database import storage_errors
from src.au_common.enums import BidStatus
from src.au_common.errors import LedgerCorruptedError, ListingNotFoundError

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

# Row lock on the owning listing serializes appends across processes too
_LOCK_LISTING_SQL = text("""
    SELECT id FROM listings WHERE id = :listing_id AND deleted_at IS NULL FOR UPDATE
""")

_DEMOTE_WINNING_SQL = text("""
    UPDATE bids SET status = 'OUTBID'
    WHERE listing_id = :listing_id AND status = 'WINNING'
""")

_INSERT_BID_SQL = text("""
    INSERT INTO bids (id, listing_id, bidder_id, amount, placed_at, status)
    VALUES (:id, :listing_id, :bidder_id, :amount, :placed_at, 'WINNING')
""")

_VOID_ALL_SQL = text("""
    UPDATE bids SET status = 'VOID'
    WHERE listing_id = :listing_id AND status <> 'VOID'
""")

_SELECT_COLUMNS = "id, listing_id, bidder_id, amount, placed_at, status"

_GET_WINNING_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bids WHERE listing_id = :listing_id AND status = 'WINNING'
    ORDER BY amount DESC, placed_at ASC, id ASC
""")

_LIST_BIDS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bids WHERE listing_id = :listing_id
    ORDER BY amount DESC, placed_at ASC, id ASC
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_bid(row: Any) -> Bid:
    """Convert a DB result row to a Bid domain object."""
    return Bid(
        id=row.id,
        listing_id=row.listing_id,
        bidder_id=row.bidder_id,
        amount=row.amount,
        placed_at=row.placed_at,
        status=BidStatus(row.status),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SqlBidLedger:
    """Concrete implementation of BidLedgerProtocol using raw SQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def highest_bid(self, listing_id: str) -> Bid | None:
        with storage_errors("read highest bid"):
            async with self._session_factory() as db:
                result = await db.execute(_GET_WINNING_SQL, {"listing_id": listing_id})
                rows = result.fetchall()
        if len(rows) > 1:
            raise LedgerCorruptedError(listing_id, f"{len(rows)} WINNING bids stored")
        return _row_to_bid(rows[0]) if rows else None

    async def append(self, bid: Bid) -> Bid:
        with storage_errors("append bid"):
            async with self._session_factory.begin() as db:
                locked = await db.execute(_LOCK_LISTING_SQL, {"listing_id": bid.listing_id})
                if locked.fetchone() is None:
                    raise ListingNotFoundError(bid.listing_id)
                await db.execute(_DEMOTE_WINNING_SQL, {"listing_id": bid.listing_id})
                await db.execute(
                    _INSERT_BID_SQL,
                    {
                        "id": bid.id,
                        "listing_id": bid.listing_id,
                        "bidder_id": bid.bidder_id,
                        "amount": bid.amount,
                        "placed_at": bid.placed_at,
                    },
                )
        return replace(bid, status=BidStatus.WINNING)

    async def bids_for(self, listing_id: str) -> list[Bid]:
        with storage_errors("list bids"):
            async with self._session_factory() as db:
                result = await db.execute(_LIST_BIDS_SQL, {"listing_id": listing_id})
                rows = result.fetchall()
        return [_row_to_bid(row) for row in rows]

    async def void_all(self, listing_id: str) -> int:
        with storage_errors("void bids"):
            async with self._session_factory.begin() as db:
                result = await db.execute(_VOID_ALL_SQL, {"listing_id": listing_id})
        return int(result.rowcount or 0)
