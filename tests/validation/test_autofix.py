import pytest

from shelfintake.core.diagnostics import EMPTY_NAME, INVALID_PRICE, INVALID_STOCK, ErrorAggregator
from shelfintake.core.validate import try_auto_fix
from shelfintake.core.validate.autofix import coerce_stock, loose_price


def _diagnostic(code: str, value, *, auto_fixable: bool = True):
    return ErrorAggregator().log("error", code, "bad value", value=value, auto_fixable=auto_fixable)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("12.5.3", 12.5),
        ("1.234,56", 1234.56),
        ("$ 99 pesos", 99.0),
    ],
)
def test_price_fixes(value, expected) -> None:
    result = try_auto_fix(_diagnostic(INVALID_PRICE, value))

    assert result.fixed
    assert result.new_value == expected


def test_unsalvageable_price_is_not_fixed() -> None:
    result = try_auto_fix(_diagnostic(INVALID_PRICE, "abc"))

    assert not result.fixed
    assert result.new_value is None


def test_stock_is_always_fixed_to_a_non_negative_integer() -> None:
    assert try_auto_fix(_diagnostic(INVALID_STOCK, "-4")).new_value == 0
    assert try_auto_fix(_diagnostic(INVALID_STOCK, "7 units")).new_value == 7
    assert try_auto_fix(_diagnostic(INVALID_STOCK, "lots")).new_value == 0


def test_only_fixable_codes_are_touched() -> None:
    assert not try_auto_fix(_diagnostic(EMPTY_NAME, "")).fixed
    assert not try_auto_fix(_diagnostic(INVALID_PRICE, "12.5.3", auto_fixable=False)).fixed


def test_loose_helpers_accept_numbers() -> None:
    assert loose_price(10) == 10.0
    assert loose_price(float("nan")) == 0.0
    assert coerce_stock(-2.5) == 0
    assert coerce_stock(True) == 0
