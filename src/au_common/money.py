"""Integer money utilities.

All prices and bid amounts are ints in currency minor units (cents).
No float, no Decimal.
"""

from src.au_common.errors import InvalidAmountError


def is_minor_units(value: object) -> bool:
    """True for a plain int; bool is an int subclass but never an amount."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_amount(amount: object) -> None:
    """Boundary check for bid amounts.

    Only the type is checked here. A zero or negative integer is still a
    well-formed amount and is turned away by the floor rule as too low.

    Raises:
        InvalidAmountError: amount is a float, bool, str or anything but an int.
    """
    if not is_minor_units(amount):
        raise InvalidAmountError(amount)


def validate_price(price: int, field: str = "price") -> None:
    """Validate a listing price: zero or more minor units."""
    if not is_minor_units(price):
        raise ValueError(f"{field} must be an integer number of minor units")
    if price < 0:
        raise ValueError(f"{field} must not be negative, got {price}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
