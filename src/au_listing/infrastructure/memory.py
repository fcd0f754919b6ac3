"""In-process listing store for the embedded (single worker) backend."""
from dataclasses import replace

from src.au_bidding.domain.ledger import BidLedgerProtocol
from src.au_common.errors import ListingNotFoundError
from src.au_listing.domain.models import Listing
from src.au_listing.domain.repository import ListingRepositoryProtocol


class InMemoryListingRepository:
    """Concrete ListingRepositoryProtocol backed by a dict.

    Returns copies so callers can only change stored state through update().
    """

    def __init__(self) -> None:
        self._listings: dict[str, Listing] = {}

    async def get(self, listing_id: str) -> Listing | None:
        listing = self._listings.get(listing_id)
        return replace(listing) if listing is not None else None

    async def add(self, listing: Listing) -> None:
        if listing.id in self._listings:
            raise ValueError(f"Listing {listing.id} already exists")
        self._listings[listing.id] = replace(listing)

    async def update(self, listing: Listing) -> None:
        if listing.id not in self._listings:
            raise KeyError(listing.id)
        self._listings[listing.id] = replace(listing)

    async def delete(self, listing_id: str) -> None:
        self._listings.pop(listing_id, None)

    async def list_listings(self) -> list[Listing]:
        return [replace(listing) for listing in self._listings.values()]


class InMemoryListingRemover:
    """ListingRemoverProtocol over the in-process stores.

    Neither step awaits real I/O, so nothing can fail between voiding the
    bids and dropping the listing.
    """

    def __init__(self, listings: ListingRepositoryProtocol, ledger: BidLedgerProtocol) -> None:
        self._listings = listings
        self._ledger = ledger

    async def remove(self, listing_id: str) -> int:
        if await self._listings.get(listing_id) is None:
            raise ListingNotFoundError(listing_id)
        voided = await self._ledger.void_all(listing_id)
        await self._listings.delete(listing_id)
        return voided
