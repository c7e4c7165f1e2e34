"""Validation rules for checkout input.

Pure functions: no state, no I/O. Each rule returns ``None`` when the value is
acceptable and the message to show next to the field otherwise. The checkout
session runs them on every edit and once more as the final gate before an
order is submitted.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date

from storefront.shared.value_objects import ADDRESS_FIELDS, Address

CARD_NUMBER_ERROR = "Card number must be 16 digits"
EXPIRY_FORMAT_ERROR = "Invalid expiry format (MM/YY)"
EXPIRY_EXPIRED_ERROR = "Card has expired"
CVV_ERROR = "CVV must be 3 or 4 digits"

_CARD_NUMBER = re.compile(r"[0-9]{16}")
_CVV = re.compile(r"[0-9]{3,4}")
_EXPIRY = re.compile(r"([0-9]{2})/([0-9]{2})")


@dataclass(frozen=True)
class PaymentErrors:
    """Per-field payment errors; ``None`` means the field is valid."""

    card_number: str | None = None
    expiry: str | None = None
    cvv: str | None = None

    @property
    def has_errors(self) -> bool:
        return any((self.card_number, self.expiry, self.cvv))

    def as_messages(self) -> dict[str, list[str]]:
        return {
            name: [message]
            for name, message in (
                ("card_number", self.card_number),
                ("expiry", self.expiry),
                ("cvv", self.cvv),
            )
            if message
        }


def is_address_complete(address: Address | Mapping | None) -> bool:
    """True iff street, city, state, zip and country are all non-empty."""
    if address is None:
        return False
    if isinstance(address, Address):
        return address.is_complete
    return all(isinstance(address.get(name), str) and address.get(name).strip() for name in ADDRESS_FIELDS)


def missing_address_fields(address: Address) -> dict[str, list[str]]:
    return {
        name: [f"{name.capitalize()} is required"] for name in ADDRESS_FIELDS if not getattr(address, name).strip()
    }


def validate_card_number(digits: str) -> str | None:
    if isinstance(digits, str) and _CARD_NUMBER.fullmatch(digits):
        return None
    return CARD_NUMBER_ERROR


def validate_expiry(month: int, year: int, today: date | None = None) -> str | None:
    """Check a card expiry given as month and two-digit year.

    The clock is read on every call unless ``today`` is given, so a session
    left open across a month boundary sees the new month.
    """
    if not 1 <= month <= 12:
        return EXPIRY_FORMAT_ERROR

    today = today or date.today()
    if (year, month) < (today.year % 100, today.month):
        return EXPIRY_EXPIRED_ERROR
    return None


def validate_expiry_text(text: str, today: date | None = None) -> str | None:
    """Check an ``MM/YY`` expiry string as typed by the buyer."""
    match = _EXPIRY.fullmatch(text or "")
    if match is None:
        return EXPIRY_FORMAT_ERROR
    return validate_expiry(int(match.group(1)), int(match.group(2)), today=today)


def validate_cvv(digits: str) -> str | None:
    if isinstance(digits, str) and _CVV.fullmatch(digits):
        return None
    return CVV_ERROR


def validate_payment(card_digits: str, expiry: str, cvv: str, today: date | None = None) -> PaymentErrors:
    """Run every payment rule at once (the submission gate)."""
    return PaymentErrors(
        card_number=validate_card_number(card_digits),
        expiry=validate_expiry_text(expiry, today=today),
        cvv=validate_cvv(cvv),
    )
