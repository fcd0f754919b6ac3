"""Global enums — stored values must match DB CHECK constraints exactly."""

from enum import Enum


class BidStatus(str, Enum):
    ACTIVE = "ACTIVE"
    OUTBID = "OUTBID"
    WINNING = "WINNING"
    VOID = "VOID"


class AuctionState(str, Enum):
    """Derived lifecycle state; never persisted."""
    NOT_AUCTION = "NOT_AUCTION"
    OPEN = "OPEN"
    SOLD = "SOLD"
    UNSOLD = "UNSOLD"

    @property
    def is_ended(self) -> bool:
        return self in (AuctionState.SOLD, AuctionState.UNSOLD)


class SaleType(str, Enum):
    FIXED = "fixed"
    AUCTION = "auction"


class RejectionReason(str, Enum):
    NOT_AN_AUCTION = "NOT_AN_AUCTION"
    AUCTION_ENDED = "AUCTION_ENDED"
    BID_TOO_LOW = "BID_TOO_LOW"
    SELF_OUTBID = "SELF_OUTBID"


class CatalogView(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"
