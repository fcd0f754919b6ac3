"""ListingCatalog — read-only listing views for display.

Takes no locks. A listing whose auction ends between the repository read
and the filter may land in either view; admission stays authoritative.
"""

from src.au_common.clock import Clock, SystemClock
from src.au_listing.domain import lifecycle
from src.au_listing.domain.models import Listing
from src.au_listing.domain.repository import ListingRepositoryProtocol


class ListingCatalog:
    def __init__(self, listings: ListingRepositoryProtocol, clock: Clock | None = None) -> None:
        self._listings = listings
        self._clock: Clock = clock or SystemClock()

    async def active_listings(self) -> list[Listing]:
        """Fixed-price listings plus auctions that are still open."""
        now = self._clock.now()
        return [
            listing
            for listing in await self._listings.list_listings()
            if not listing.is_auction or lifecycle.is_open(listing, now)
        ]

    async def ended_auctions(self) -> list[Listing]:
        now = self._clock.now()
        return [
            listing
            for listing in await self._listings.list_listings()
            if lifecycle.is_ended(listing, now)
        ]
