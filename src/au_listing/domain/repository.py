# src/au_listing/domain/repository.py
"""ListingRepository Protocol — dependency inversion for testability.

The engine only ever talks to this Protocol; the infrastructure layer
provides an in-memory and a PostgreSQL implementation.
"""
from typing import Protocol

from src.au_listing.domain.models import Listing


class ListingRepositoryProtocol(Protocol):
    async def get(self, listing_id: str) -> Listing | None: ...

    async def add(self, listing: Listing) -> None: ...

    async def update(self, listing: Listing) -> None: ...

    async def delete(self, listing_id: str) -> None: ...

    async def list_listings(self) -> list[Listing]: ...


class ListingRemoverProtocol(Protocol):
    async def remove(self, listing_id: str) -> int:
        """Void every bid of the listing and delete it, all or nothing.

        Returns how many bids were voided. Raises ListingNotFoundError when
        the listing is already gone.
        """
        ...
