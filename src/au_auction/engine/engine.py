"""AuctionEngine — stateful orchestrator for per-listing bid admission.

Every write to a listing (bid admission, relist, end-time change, edit,
delete) runs inside that listing's asyncio.Lock. asyncio.Lock wakes waiters
in FIFO order, so admissions for one listing are applied in submission
order, while different listings never contend. Reads take no lock and may
see a snapshot that is a moment stale; admission re-validates under the lock.
"""
import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime

from src.au_bidding.domain.invariants import verify_ledger_invariants
from src.au_bidding.domain.ledger import BidLedgerProtocol
from src.au_bidding.domain.models import Bid
from src.au_common.clock import Clock, SystemClock
from src.au_common.enums import AuctionState, BidStatus
from src.au_common.errors import (
    AuctionEndedError,
    BidRejectedError,
    BidTooLowError,
    InvalidListingUpdateError,
    ListingBusyError,
    ListingNotFoundError,
    NotAnAuctionError,
    SelfOutbidError,
)
from src.au_common.id_generator import generate_id
from src.au_common.money import validate_amount, validate_price
from src.au_listing.domain import lifecycle
from src.au_listing.domain.models import Listing
from src.au_listing.domain.repository import ListingRemoverProtocol, ListingRepositoryProtocol
from src.au_listing.infrastructure.memory import InMemoryListingRemover

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineOptions:
    allow_self_outbid: bool = True
    verify_invariants: bool = True
    lock_timeout_seconds: float = 5.0
    max_duration_days: int | None = None


@dataclass
class ListingSnapshot:
    """Read-side view of one listing: derived state plus price summary."""

    listing: Listing
    state: AuctionState
    highest_bid: Bid | None
    current_price: int  # highest bid amount, else base price
    bid_count: int


def current_floor(listing: Listing, highest: Bid | None) -> int:
    """Amount a new bid must strictly exceed."""
    return max(highest.amount if highest is not None else 0, listing.base_price, 0)


class AuctionEngine:
    def __init__(
        self,
        listings: ListingRepositoryProtocol,
        ledger: BidLedgerProtocol,
        clock: Clock | None = None,
        options: EngineOptions | None = None,
        remover: ListingRemoverProtocol | None = None,
    ) -> None:
        self.listings = listings
        self.ledger = ledger
        # Storage that can fail midway (SQL) must pass a transactional remover
        self.remover: ListingRemoverProtocol = remover or InMemoryListingRemover(listings, ledger)
        self.clock: Clock = clock or SystemClock()
        self.options = options or EngineOptions()
        self._listing_locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        # Holders plus waiters per listing; a lock is dropped once nobody uses it
        self._lock_users: dict[str, int] = defaultdict(int)

    def _get_or_create_lock(self, listing_id: str) -> asyncio.Lock:
        return self._listing_locks[listing_id]

    @asynccontextmanager
    async def _exclusive(self, listing_id: str) -> AsyncIterator[None]:
        """Per-listing critical section with a bounded wait."""
        lock = self._get_or_create_lock(listing_id)
        self._lock_users[listing_id] += 1
        try:
            try:
                await asyncio.wait_for(
                    lock.acquire(), timeout=self.options.lock_timeout_seconds
                )
            except TimeoutError:
                logger.warning("Lock wait timed out: listing=%s", listing_id)
                raise ListingBusyError(listing_id) from None
            try:
                yield
            finally:
                lock.release()
        finally:
            self._lock_users[listing_id] -= 1
            if self._lock_users[listing_id] == 0:
                del self._lock_users[listing_id]
                self._listing_locks.pop(listing_id, None)

    async def _require_listing(self, listing_id: str) -> Listing:
        listing = await self.listings.get(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    # ------------------------------------------------------------------
    # Bid admission
    # ------------------------------------------------------------------

    async def place_bid(self, listing_id: str, bidder_id: str, amount: int) -> Bid:
        """Admit a bid or raise a BidRejectedError. Main entry point."""
        validate_amount(amount)
        async with self._exclusive(listing_id):
            try:
                bid = await self._place_bid_inner(listing_id, bidder_id, amount)
            except BidRejectedError as exc:
                logger.info(
                    "Bid rejected: listing=%s bidder=%s amount=%d reason=%s",
                    listing_id, bidder_id, amount, exc.reason.value,
                )
                raise
        logger.info(
            "Bid accepted: listing=%s bidder=%s amount=%d bid=%s",
            listing_id, bidder_id, amount, bid.id,
        )
        return bid

    async def _place_bid_inner(self, listing_id: str, bidder_id: str, amount: int) -> Bid:
        listing = await self._require_listing(listing_id)
        now = self.clock.now()

        # Lifecycle
        if not listing.is_auction:
            raise NotAnAuctionError(listing_id)
        if not lifecycle.is_open(listing, now):
            raise AuctionEndedError(listing_id)

        # Floor (strict)
        highest = await self.ledger.highest_bid(listing_id)
        floor = current_floor(listing, highest)
        if amount <= floor:
            raise BidTooLowError(amount, floor)

        if (
            highest is not None
            and highest.bidder_id == bidder_id
            and not self.options.allow_self_outbid
        ):
            raise SelfOutbidError(bidder_id)

        bid = await self.ledger.append(
            Bid(
                id=generate_id(),
                listing_id=listing_id,
                bidder_id=bidder_id,
                amount=amount,
                placed_at=now,
                status=BidStatus.ACTIVE,
            )
        )

        if self.options.verify_invariants:
            verify_ledger_invariants(listing_id, await self.ledger.bids_for(listing_id))
        return bid

    # ------------------------------------------------------------------
    # Listing creation
    # ------------------------------------------------------------------

    async def create_listing(
        self,
        seller_id: str,
        title: str,
        base_price: int,
        description: str | None = None,
    ) -> Listing:
        """Create a fixed-price listing (never has an end time)."""
        validate_price(base_price, "base_price")
        now = self.clock.now()
        listing = Listing(
            id=generate_id(),
            seller_id=seller_id,
            title=title,
            description=description,
            base_price=base_price,
            created_at=now,
            updated_at=now,
        )
        await self.listings.add(listing)
        logger.info("Listing created: id=%s seller=%s", listing.id, seller_id)
        return listing

    async def create_auction(
        self,
        seller_id: str,
        title: str,
        base_price: int,
        duration_days: int,
        reserve_price: int | None = None,
        description: str | None = None,
    ) -> Listing:
        validate_price(base_price, "base_price")
        if reserve_price is not None:
            validate_price(reserve_price, "reserve_price")
        duration = lifecycle.duration_from_days(duration_days, self.options.max_duration_days)
        now = self.clock.now()
        listing = Listing(
            id=generate_id(),
            seller_id=seller_id,
            title=title,
            description=description,
            base_price=base_price,
            reserve_price=reserve_price,
            created_at=now,
        )
        lifecycle.open_auction(listing, duration, now)
        await self.listings.add(listing)
        logger.info(
            "Auction created: id=%s seller=%s ends=%s",
            listing.id, seller_id, listing.auction_end_time.isoformat(),  # type: ignore[union-attr]
        )
        return listing

    # ------------------------------------------------------------------
    # Lifecycle mutations
    # ------------------------------------------------------------------

    async def relist(self, listing_id: str, duration_days: int | None = None) -> Listing:
        async with self._exclusive(listing_id):
            listing = await self._require_listing(listing_id)
            duration = (
                lifecycle.duration_from_days(duration_days, self.options.max_duration_days)
                if duration_days is not None
                else None
            )
            lifecycle.relist(listing, self.clock.now(), duration)
            await self.listings.update(listing)
        logger.info(
            "Auction relisted: id=%s ends=%s",
            listing_id, listing.auction_end_time.isoformat(),  # type: ignore[union-attr]
        )
        return listing

    async def update_end_time(self, listing_id: str, new_end_time: datetime) -> Listing:
        async with self._exclusive(listing_id):
            listing = await self._require_listing(listing_id)
            lifecycle.update_end_time(listing, new_end_time, self.clock.now())
            await self.listings.update(listing)
        logger.info("Auction end time updated: id=%s ends=%s", listing_id, new_end_time.isoformat())
        return listing

    async def update_listing(
        self,
        listing_id: str,
        title: str | None = None,
        description: str | None = None,
        base_price: int | None = None,
        reserve_price: int | None = None,
        clear_reserve: bool = False,
    ) -> Listing:
        """Edit descriptive fields and prices. Raising base_price raises the floor.

        A reserve only exists on auctions; clear_reserve drops an existing one.
        """
        if clear_reserve and reserve_price is not None:
            raise InvalidListingUpdateError(listing_id, "set or clear the reserve, not both")
        async with self._exclusive(listing_id):
            listing = await self._require_listing(listing_id)
            if reserve_price is not None and not listing.is_auction:
                raise InvalidListingUpdateError(
                    listing_id, "fixed-price listings take no reserve price"
                )
            if title is not None:
                listing.title = title
            if description is not None:
                listing.description = description
            if base_price is not None:
                validate_price(base_price, "base_price")
                listing.base_price = base_price
            if reserve_price is not None:
                validate_price(reserve_price, "reserve_price")
                listing.reserve_price = reserve_price
            if clear_reserve:
                listing.reserve_price = None
            listing.updated_at = self.clock.now()
            await self.listings.update(listing)
        return listing

    async def delete_listing(self, listing_id: str) -> int:
        """Remove a listing; its bids stay in the ledger as VOID. Returns voided count."""
        async with self._exclusive(listing_id):
            voided = await self.remover.remove(listing_id)
        logger.info("Listing deleted: id=%s voided_bids=%d", listing_id, voided)
        return voided

    # ------------------------------------------------------------------
    # Reads (lock-free)
    # ------------------------------------------------------------------

    async def get_listing(self, listing_id: str) -> Listing:
        return await self._require_listing(listing_id)

    async def highest_bid(self, listing_id: str) -> Bid | None:
        await self._require_listing(listing_id)
        return await self.ledger.highest_bid(listing_id)

    async def bids_for(self, listing_id: str) -> list[Bid]:
        await self._require_listing(listing_id)
        return await self.ledger.bids_for(listing_id)

    async def auction_state(self, listing_id: str) -> AuctionState:
        listing = await self._require_listing(listing_id)
        highest = await self.ledger.highest_bid(listing_id)
        return lifecycle.auction_state(
            listing, self.clock.now(), highest.amount if highest else None
        )

    async def snapshot(self, listing_id: str) -> ListingSnapshot:
        listing = await self._require_listing(listing_id)
        bids = await self.ledger.bids_for(listing_id)
        highest = next((b for b in bids if b.is_winning), None)
        return ListingSnapshot(
            listing=listing,
            state=lifecycle.auction_state(
                listing, self.clock.now(), highest.amount if highest else None
            ),
            highest_bid=highest,
            current_price=highest.amount if highest else listing.base_price,
            bid_count=sum(1 for b in bids if b.counts),
        )
