"""In-process bid ledger for the embedded (single worker) backend."""
from collections import defaultdict
from dataclasses import replace

from src.au_bidding.domain.ledger import rank_bids
from src.au_bidding.domain.models import Bid
from src.au_common.enums import BidStatus


class InMemoryBidLedger:
    """Concrete BidLedgerProtocol backed by per-listing append-only lists.

    No method awaits between reading and writing, so each call is atomic on
    the event loop; cross-step atomicity is the engine's per-listing lock.
    """

    def __init__(self) -> None:
        self._bids: dict[str, list[Bid]] = defaultdict(list)
        # _winning[listing_id] = index into self._bids[listing_id]
        self._winning: dict[str, int] = {}

    async def highest_bid(self, listing_id: str) -> Bid | None:
        idx = self._winning.get(listing_id)
        if idx is None:
            return None
        return replace(self._bids[listing_id][idx])

    async def append(self, bid: Bid) -> Bid:
        bids = self._bids[bid.listing_id]
        prev_idx = self._winning.get(bid.listing_id)
        if prev_idx is not None:
            bids[prev_idx].status = BidStatus.OUTBID
        stored = replace(bid, status=BidStatus.WINNING)
        bids.append(stored)
        self._winning[bid.listing_id] = len(bids) - 1
        return replace(stored)

    async def bids_for(self, listing_id: str) -> list[Bid]:
        return [replace(b) for b in rank_bids(self._bids.get(listing_id, []))]

    async def void_all(self, listing_id: str) -> int:
        changed = 0
        for b in self._bids.get(listing_id, []):
            if b.status != BidStatus.VOID:
                b.status = BidStatus.VOID
                changed += 1
        self._winning.pop(listing_id, None)
        return changed
