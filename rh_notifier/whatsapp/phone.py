"""Phone number helpers for WhatsApp addresses (digit-only, country prefix first)."""

import re

from rh_notifier.config import WHATSAPP_COUNTRY_CODE
from rh_notifier.errors import InvalidAddressError

_NON_DIGITS = re.compile(r"[^0-9]")
_DISPLAY = re.compile(r"(\d{3})(\d{4})(\d{4})")

MIN_DIGITS = 10


def clean_number(raw: str) -> str:
    """Strip everything but digits."""
    return _NON_DIGITS.sub("", raw or "")


def has_prefix(number: str, country_code: str = WHATSAPP_COUNTRY_CODE) -> bool:
    return number.startswith(country_code)


def to_international(raw: str, country_code: str = WHATSAPP_COUNTRY_CODE) -> str:
    """Normalize user input for storage: 0812... -> 62812..., 812... -> 62812...

    Raises InvalidAddressError when fewer than 10 digits remain.
    """
    number = clean_number(raw)
    if len(number) < MIN_DIGITS:
        raise InvalidAddressError(f"Nomor WhatsApp tidak valid: {raw!r}")
    if number.startswith("0"):
        number = country_code + number[1:]
    elif not number.startswith(country_code):
        number = country_code + number
    return number


def format_display(number: str) -> str:
    """6281234567890 -> 628-1234-567890"""
    return _DISPLAY.sub(r"\1-\2-\3", number or "", count=1)


def mask(number: str) -> str:
    """Hide all but the last four digits for logs."""
    if not number:
        return ""
    if len(number) <= 4:
        return "*" * len(number)
    return "*" * (len(number) - 4) + number[-4:]
