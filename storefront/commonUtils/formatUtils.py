import re
from typing import Optional

from storefront.config.settings import settings

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

CARD_NUMBER_MAX_DIGITS = 16
EXPIRY_MAX_DIGITS = 4
CVC_MAX_DIGITS = 4


def digits_only(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def normalize_card_number(value: Optional[str]) -> str:
    return digits_only(value)[:CARD_NUMBER_MAX_DIGITS]


def format_expiry(value: Optional[str]) -> str:
    """Keeps up to four digits and inserts the slash once the year starts"""
    digits = digits_only(value)[:EXPIRY_MAX_DIGITS]
    if len(digits) >= 3:
        return f"{digits[:2]}/{digits[2:]}"
    return digits


def normalize_cvc(value: Optional[str]) -> str:
    return digits_only(value)[:CVC_MAX_DIGITS]


def mask_card_number(digits: str) -> str:
    """Hide all but the last four digits, grouped like the input field"""
    if len(digits) <= 4:
        return digits
    masked = "•" * (len(digits) - 4) + digits[-4:]
    return re.sub(r"(.{4})(?=.)", r"\1 ", masked)


def format_amount(amount: float) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:,.0f}" if float(amount).is_integer() \
        else f"{settings.CURRENCY_SYMBOL}{amount:,.2f}"


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("Base-36 conversion expects a non-negative integer")
    if number == 0:
        return "0"

    encoded = []
    while number:
        number, remainder = divmod(number, 36)
        encoded.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(encoded))
