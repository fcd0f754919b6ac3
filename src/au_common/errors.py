"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  3xxx: Listing / lifecycle
  4xxx: Bid admission (rejections)
  9xxx: System

Bid rejections derive from BidRejectedError and carry a RejectionReason.
Fatal engine conditions derive from FatalEngineError and are never
BidRejectedError, so "your bid lost" and "the system is broken" stay
distinguishable for callers.
"""

from src.au_common.enums import RejectionReason


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


# --- 3xxx: Listing / lifecycle ---

class ListingNotFoundError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3001, f"Listing not found: {listing_id}", 404)


class InvalidDurationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3002, f"Invalid auction duration: {detail}", 422)


class AuctionNotEndedError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3003, f"Auction has not ended: {listing_id}", 409)


class AuctionNotOpenError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3004, f"Auction is not open: {listing_id}", 409)


class NotListingOwnerError(AppError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(3005, f"Listing {listing_id} is not owned by the caller", 403)


class InvalidListingUpdateError(AppError):
    def __init__(self, listing_id: str, detail: str) -> None:
        super().__init__(3006, f"Invalid update for listing {listing_id}: {detail}", 422)


# --- 4xxx: Bid admission ---

class InvalidAmountError(AppError):
    """Amount is not a whole number of minor units. Malformed input, not a rejection."""

    def __init__(self, amount: object) -> None:
        super().__init__(
            4005, f"Bid amount must be an integer number of minor units, got {amount!r}", 422
        )


class BidRejectedError(AppError):
    """Expected, caller-facing rejection of a bid. Never mutates the ledger."""

    def __init__(self, code: int, reason: RejectionReason, message: str) -> None:
        self.reason = reason
        super().__init__(code, message, 422)


class NotAnAuctionError(BidRejectedError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(
            4001, RejectionReason.NOT_AN_AUCTION, f"Listing {listing_id} is not an auction"
        )


class AuctionEndedError(BidRejectedError):
    def __init__(self, listing_id: str) -> None:
        super().__init__(
            4002, RejectionReason.AUCTION_ENDED, f"Auction {listing_id} has ended"
        )


class BidTooLowError(BidRejectedError):
    def __init__(self, amount: int, floor: int) -> None:
        self.amount = amount
        self.floor = floor
        super().__init__(
            4003,
            RejectionReason.BID_TOO_LOW,
            f"Bid too low: {amount} must be higher than the current bid {floor}",
        )


class SelfOutbidError(BidRejectedError):
    def __init__(self, bidder_id: str) -> None:
        super().__init__(
            4004,
            RejectionReason.SELF_OUTBID,
            f"Bidder {bidder_id} already holds the winning bid",
        )


# --- 9xxx: System ---

class ListingBusyError(AppError):
    """Per-listing critical section could not be entered in time. Safe to retry."""

    def __init__(self, listing_id: str) -> None:
        super().__init__(9003, f"Listing {listing_id} is busy, retry later", 503)


class FatalEngineError(AppError):
    """Unrecoverable engine condition; must never be reported as a rejection."""


class LedgerCorruptedError(FatalEngineError):
    def __init__(self, listing_id: str, detail: str) -> None:
        super().__init__(9101, f"Ledger invariant violated for {listing_id}: {detail}", 500)


class StorageUnavailableError(FatalEngineError):
    def __init__(self, detail: str = "Storage unavailable") -> None:
        super().__init__(9102, detail, 503)
