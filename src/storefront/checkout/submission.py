"""Order submission — outbound request construction and reply interpretation.

The request is built from an explicit allow-list of fields: only the five
address fields, the card fields and the cart line fields are ever sent,
whatever else the in-memory objects happen to carry.

The reply handler never raises. A reply that reports success and carries an
order leads to confirmation; anything else is a recoverable failure.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as SchemaValidationError

from storefront.checkout.card_input import card_digits
from storefront.shared.value_objects import Address, CartItem, Order
from storefront.store.schemas import CreateOrderResult

GENERIC_FAILURE = "Error placing order"


@dataclass(frozen=True)
class SubmissionOutcome:
    success: bool
    message: str
    order: Order | None = None


def build_order_request(
    user_id: str,
    items: tuple[CartItem, ...],
    total_price: float,
    billing: Address,
    shipping: Address,
    card_number: str,
    expiry: str,
    cvv: str,
) -> dict[str, Any]:
    """Variables for the createOrder mutation."""
    return {
        "userId": user_id,
        "items": [item.to_input() for item in items],
        "totalPrice": total_price,
        "billing": billing.to_input(),
        "shipping": shipping.to_input(),
        "payment": {
            "cardNumber": card_digits(card_number),
            "expiry": expiry,
            "cvv": cvv,
        },
    }


def interpret_order_response(payload: Any) -> SubmissionOutcome:
    """Turn the store's createOrder reply into a submission outcome."""
    try:
        result = CreateOrderResult.model_validate(payload)
    except SchemaValidationError:
        return SubmissionOutcome(success=False, message=GENERIC_FAILURE)

    if result.success and result.order is not None:
        return SubmissionOutcome(success=True, message=result.message or "", order=result.order)
    if result.success:
        # Reported success without an order to show
        return SubmissionOutcome(success=False, message=GENERIC_FAILURE)
    return SubmissionOutcome(success=False, message=result.message or GENERIC_FAILURE)


def transport_failure() -> SubmissionOutcome:
    return SubmissionOutcome(success=False, message=GENERIC_FAILURE)
