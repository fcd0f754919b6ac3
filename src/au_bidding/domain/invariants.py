"""Ledger invariant verification after each admission."""

import logging

from src.au_bidding.domain.ledger import pick_highest
from src.au_bidding.domain.models import Bid
from src.au_common.errors import LedgerCorruptedError

logger = logging.getLogger(__name__)


def verify_ledger_invariants(listing_id: str, bids: list[Bid]) -> None:
    """Raise LedgerCorruptedError if the listing's bids break the ledger rules.

    INV-1: at most one bid is WINNING
    INV-2: if any non-VOID bid exists, exactly one is WINNING and it ranks highest
    INV-3: every bid belongs to listing_id
    """
    foreign = [b.id for b in bids if b.listing_id != listing_id]
    if foreign:
        raise LedgerCorruptedError(listing_id, f"bids {foreign} belong to another listing")

    winning = [b for b in bids if b.is_winning]
    if len(winning) > 1:
        raise LedgerCorruptedError(
            listing_id, f"{len(winning)} WINNING bids: {[b.id for b in winning]}"
        )

    best = pick_highest(bids)
    if best is None:
        if winning:
            raise LedgerCorruptedError(listing_id, "WINNING bid exists among only VOID bids")
        return
    if not winning:
        raise LedgerCorruptedError(listing_id, "no WINNING bid although bids exist")
    if winning[0].amount != best.amount:
        raise LedgerCorruptedError(
            listing_id,
            f"WINNING bid {winning[0].id} ({winning[0].amount}) "
            f"is not the highest ({best.id}, {best.amount})",
        )

    logger.debug(
        "Ledger invariants OK: listing=%s, bids=%d, winning=%s",
        listing_id, len(bids), winning[0].id,
    )
