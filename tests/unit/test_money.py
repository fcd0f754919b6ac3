"""Tests for integer money helpers."""
import pytest

from src.au_common.errors import InvalidAmountError
from src.au_common.money import cents_to_display, is_minor_units, validate_amount, validate_price


class TestValidateAmount:
    def test_integers_pass(self) -> None:
        validate_amount(1)
        validate_amount(10_000_000)
        # sign is left to the floor rule
        validate_amount(0)
        validate_amount(-5)

    @pytest.mark.parametrize("bad", [100.5, 150.0, True, "100", None])
    def test_non_integers_rejected(self, bad) -> None:
        with pytest.raises(InvalidAmountError) as exc:
            validate_amount(bad)
        assert exc.value.code == 4005
        assert exc.value.http_status == 422

    def test_bool_is_not_minor_units(self) -> None:
        assert is_minor_units(7)
        assert not is_minor_units(False)


class TestValidatePrice:
    def test_zero_allowed(self) -> None:
        validate_price(0)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="base_price"):
            validate_price(-1, "base_price")


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(6500) == "$65.00"
        assert cents_to_display(5) == "$0.05"

    def test_thousands(self) -> None:
        assert cents_to_display(123456789) == "$1,234,567.89"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-$12.00"
