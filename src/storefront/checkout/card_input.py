"""Keystroke normalizers for the payment form.

Each normalizer turns whatever the buyer typed into the canonical display
form. Re-normalizing already-normalized text returns it unchanged.
"""

import re

CARD_NUMBER_LENGTH = 16
EXPIRY_DIGITS = 4
CVV_MAX_LENGTH = 4

_NON_DIGITS = re.compile(r"[^0-9]")
_WHITESPACE = re.compile(r"\s")


def _digits(raw: str | None) -> str:
    return _NON_DIGITS.sub("", raw or "")


def normalize_card_number(raw: str | None) -> str:
    """``"4111-1111 1111"`` → ``"4111 1111 1111"``; at most 16 digits."""
    digits = _digits(raw)[:CARD_NUMBER_LENGTH]
    return " ".join(digits[i : i + 4] for i in range(0, len(digits), 4))


def card_digits(text: str | None) -> str:
    """Strip the display grouping before the number leaves the form."""
    return _WHITESPACE.sub("", text or "")


def normalize_expiry(raw: str | None) -> str:
    """``"1234"`` → ``"12/34"``. The slash appears once a third digit is typed."""
    digits = _digits(raw)[:EXPIRY_DIGITS]
    if len(digits) > 2:
        return f"{digits[:2]}/{digits[2:]}"
    return digits


def normalize_cvv(raw: str | None) -> str:
    return _digits(raw)[:CVV_MAX_LENGTH]


def mask_card_number(text: str | None) -> str:
    """``"4111 1111 1111 1111"`` → ``"**** **** **** 1111"``. Only the last four digits stay readable."""
    digits = card_digits(text)
    masked = "*" * max(len(digits) - 4, 0) + digits[-4:]
    return " ".join(masked[i : i + 4] for i in range(0, len(masked), 4))
