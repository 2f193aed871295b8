from __future__ import annotations

import pytest

from storefront.commonUtils.formatUtils import (
    format_amount,
    format_expiry,
    mask_card_number,
    to_base36,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", "1"), ("12", "12"), ("122", "12/2"), ("1229", "12/29"), ("12/29", "12/29"), ("122999", "12/29")],
)
def test_expiry_formatting(raw: str, expected: str) -> None:
    assert format_expiry(raw) == expected


def test_mask_keeps_last_four_digits() -> None:
    assert mask_card_number("1234") == "1234"
    assert mask_card_number("123456") == "••34 56"


def test_amount_formatting() -> None:
    assert format_amount(16400) == "₦16,400"
    assert format_amount(99.5) == "₦99.50"


def test_base36() -> None:
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    assert to_base36(1_700_000_000_000) == "loyw3v28"

    with pytest.raises(ValueError):
        to_base36(-1)
