# src/au_bidding/domain/ledger.py
"""BidLedger Protocol and the ordering rules every implementation shares."""
from collections.abc import Iterable
from typing import Protocol

from src.au_bidding.domain.models import Bid


class BidLedgerProtocol(Protocol):
    async def highest_bid(self, listing_id: str) -> Bid | None:
        """Current WINNING bid, or None when the listing has no bids."""
        ...

    async def append(self, bid: Bid) -> Bid:
        """Store bid as WINNING and demote the previous WINNING bid to OUTBID.

        Must be atomic per listing. Returns the stored bid.
        """
        ...

    async def bids_for(self, listing_id: str) -> list[Bid]:
        """Snapshot of all bids, amount descending then placed_at ascending."""
        ...

    async def void_all(self, listing_id: str) -> int:
        """Mark every bid of the listing VOID; returns how many changed."""
        ...


def ranking_key(bid: Bid) -> tuple[int, object, str]:
    """Higher amount first; at equal amounts the earliest bid keeps priority."""
    return (-bid.amount, bid.placed_at, bid.id)


def rank_bids(bids: Iterable[Bid]) -> list[Bid]:
    return sorted(bids, key=ranking_key)


def pick_highest(bids: Iterable[Bid]) -> Bid | None:
    """Best non-VOID bid by amount, earliest placed_at on ties."""
    ranked = rank_bids(b for b in bids if b.counts)
    return ranked[0] if ranked else None
