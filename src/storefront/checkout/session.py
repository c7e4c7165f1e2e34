"""Checkout session — the three-step wizard that turns a cart into an order.

State Machine (3 states):
    SHIPPING → PAYMENT → CONFIRMATION
    PAYMENT → SHIPPING ("Back", keeps every entered value)
    CONFIRMATION is terminal: once an order is placed the session is frozen.

Gates:
    SHIPPING → PAYMENT      the active address (billing when "use same
                            address" is ticked, shipping otherwise) is complete
    PAYMENT → CONFIRMATION  card number, expiry and CVV are filled and valid,
                            no submission in flight, and the store reported
                            success for exactly one createOrder call

A failed submission keeps the session on PAYMENT with the entered payment
data intact so the buyer can correct it and try again.
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

import structlog
from protean.exceptions import InvalidOperationError, ValidationError

from storefront.checkout.card_input import card_digits, normalize_card_number, normalize_cvv, normalize_expiry
from storefront.checkout.submission import (
    SubmissionOutcome,
    build_order_request,
    interpret_order_response,
    transport_failure,
)
from storefront.checkout.validation import (
    PaymentErrors,
    missing_address_fields,
    validate_card_number,
    validate_cvv,
    validate_expiry_text,
    validate_payment,
)
from storefront.exceptions import StoreError
from storefront.shared.value_objects import ADDRESS_FIELDS, Address, CartItem, CheckoutHandoff, Order, Session
from storefront.store.port import RemoteStore

logger = structlog.get_logger(__name__)

EMPTY_CART_ERROR = "Your cart is empty"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class CheckoutStep(Enum):
    SHIPPING = "Shipping"
    PAYMENT = "Payment"
    CONFIRMATION = "Confirmation"


# State machine transition map
_VALID_TRANSITIONS = {
    CheckoutStep.SHIPPING: {CheckoutStep.PAYMENT},
    CheckoutStep.PAYMENT: {CheckoutStep.SHIPPING, CheckoutStep.CONFIRMATION},
    CheckoutStep.CONFIRMATION: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PaymentDraft:
    """Card data as displayed in the payment form."""

    card_number: str = ""
    expiry: str = ""
    cvv: str = ""

    @property
    def card_digits(self) -> str:
        return card_digits(self.card_number)

    @property
    def is_filled(self) -> bool:
        return bool(self.card_number and self.expiry and self.cvv)


@dataclass(frozen=True)
class SummaryLine:
    item_id: str
    name: str
    item_type: str
    quantity: int
    subtotal: float
    image_url: str | None = None


@dataclass(frozen=True)
class OrderSummary:
    lines: tuple[SummaryLine, ...]
    total_price: float


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
class CheckoutSession:
    def __init__(
        self,
        session: Session,
        handoff: CheckoutHandoff | None,
        store: RemoteStore,
        today: Callable[[], date] = date.today,
    ) -> None:
        if session is None or not session.is_authenticated:
            raise InvalidOperationError("An authenticated buyer is required to check out")

        handoff = handoff or CheckoutHandoff()
        self.buyer = session
        self.store = store
        self.cart_items: tuple[CartItem, ...] = handoff.cart_items
        self.total_price: float = handoff.total_price
        self._today = today

        self.step = CheckoutStep.SHIPPING
        self.billing = session.billing_addresses[0] if session.billing_addresses else Address()
        self.shipping = session.shipping_addresses[0] if session.shipping_addresses else Address()
        self.use_same_address = True
        self.payment = PaymentDraft()
        self.errors = PaymentErrors()
        self.is_submitting = False
        self.placed_order: Order | None = None
        self.submission_error: str | None = None

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: CheckoutStep) -> None:
        if target not in _VALID_TRANSITIONS[self.step]:
            raise InvalidOperationError(f"Cannot move from {self.step.value} to {target.value}")

    def _assert_step(self, step: CheckoutStep, action: str) -> None:
        if self.step != step:
            raise InvalidOperationError(f"Cannot {action} during the {self.step.value} step")
        if self.is_submitting:
            raise InvalidOperationError(f"Cannot {action} while the order is being placed")

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.cart_items

    @property
    def is_confirmed(self) -> bool:
        return self.placed_order is not None

    @property
    def shipping_options(self) -> tuple[Address, ...]:
        return self.buyer.shipping_addresses

    @property
    def active_address(self) -> Address:
        return self.billing if self.use_same_address else self.shipping

    @property
    def can_continue(self) -> bool:
        return self.step == CheckoutStep.SHIPPING and not self.is_empty and self.active_address.is_complete

    @property
    def can_place_order(self) -> bool:
        if self.step != CheckoutStep.PAYMENT or self.is_submitting or self.is_empty:
            return False
        if not self.payment.is_filled:
            return False
        return not self._validate_payment().has_errors

    def order_summary(self) -> OrderSummary:
        lines = tuple(
            SummaryLine(
                item_id=item.item_id,
                name=item.name,
                item_type=item.item_type.value,
                quantity=item.quantity,
                subtotal=item.subtotal,
                image_url=item.image_url,
            )
            for item in self.cart_items
        )
        return OrderSummary(lines=lines, total_price=self.total_price)

    # -------------------------------------------------------------------
    # Shipping step
    # -------------------------------------------------------------------
    def select_shipping_address(self, index: int) -> Address:
        """Use one of the buyer's saved shipping addresses."""
        self._assert_step(CheckoutStep.SHIPPING, "select an address")
        if not 0 <= index < len(self.shipping_options):
            raise ValidationError({"shipping": ["Unknown shipping address"]})

        self.shipping = self.shipping_options[index]
        self.use_same_address = False
        return self.shipping

    def set_use_same_address(self, use_same: bool) -> None:
        self._assert_step(CheckoutStep.SHIPPING, "change the shipping address")
        self.use_same_address = bool(use_same)

    def edit_shipping(self, field: str, value: str) -> Address:
        self._assert_step(CheckoutStep.SHIPPING, "edit the shipping address")
        if field not in ADDRESS_FIELDS:
            raise ValidationError({field: ["Unknown address field"]})

        self.shipping = self.shipping.replace(**{field: value or ""})
        return self.shipping

    def continue_to_payment(self) -> None:
        self._assert_step(CheckoutStep.SHIPPING, "continue to payment")
        self._assert_can_transition(CheckoutStep.PAYMENT)
        if self.is_empty:
            raise ValidationError({"cart": [EMPTY_CART_ERROR]})
        if not self.active_address.is_complete:
            raise ValidationError(missing_address_fields(self.active_address))

        self.step = CheckoutStep.PAYMENT
        logger.info("Checkout moved to payment", user_id=self.buyer.user_id)

    # -------------------------------------------------------------------
    # Payment step
    # -------------------------------------------------------------------
    def back(self) -> None:
        """Return to the shipping step. Nothing entered so far is lost."""
        self._assert_can_transition(CheckoutStep.SHIPPING)
        if self.is_submitting:
            raise InvalidOperationError("Cannot go back while the order is being placed")
        self.step = CheckoutStep.SHIPPING

    def enter_card_number(self, raw: str) -> str:
        self._assert_step(CheckoutStep.PAYMENT, "edit payment details")
        self.payment = dataclasses.replace(self.payment, card_number=normalize_card_number(raw))
        self.errors = dataclasses.replace(self.errors, card_number=validate_card_number(self.payment.card_digits))
        return self.payment.card_number

    def enter_expiry(self, raw: str) -> str:
        self._assert_step(CheckoutStep.PAYMENT, "edit payment details")
        self.payment = dataclasses.replace(self.payment, expiry=normalize_expiry(raw))
        self.errors = dataclasses.replace(
            self.errors, expiry=validate_expiry_text(self.payment.expiry, today=self._today())
        )
        return self.payment.expiry

    def enter_cvv(self, raw: str) -> str:
        self._assert_step(CheckoutStep.PAYMENT, "edit payment details")
        self.payment = dataclasses.replace(self.payment, cvv=normalize_cvv(raw))
        self.errors = dataclasses.replace(self.errors, cvv=validate_cvv(self.payment.cvv))
        return self.payment.cvv

    def _validate_payment(self) -> PaymentErrors:
        return validate_payment(
            self.payment.card_digits,
            self.payment.expiry,
            self.payment.cvv,
            today=self._today(),
        )

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    async def place_order(self) -> SubmissionOutcome:
        """Submit the order: one createOrder call per invocation.

        Raises ``ValidationError`` (without calling the store) when the
        final re-validation fails, and ``InvalidOperationError`` when not on
        the payment step or a submission is already in flight. Remote
        failures never raise; they come back as an unsuccessful outcome.
        """
        self._assert_step(CheckoutStep.PAYMENT, "place an order")
        self._assert_can_transition(CheckoutStep.CONFIRMATION)
        if self.is_empty:
            raise ValidationError({"cart": [EMPTY_CART_ERROR]})
        if not self.active_address.is_complete:
            raise ValidationError(missing_address_fields(self.active_address))

        self.errors = self._validate_payment()
        if self.errors.has_errors:
            raise ValidationError(self.errors.as_messages())

        self.is_submitting = True
        self.submission_error = None
        variables = build_order_request(
            user_id=self.buyer.user_id,
            items=self.cart_items,
            total_price=self.total_price,
            billing=self.billing,
            shipping=self.active_address,
            card_number=self.payment.card_number,
            expiry=self.payment.expiry,
            cvv=self.payment.cvv,
        )
        try:
            outcome = await self._submit(variables)
            if outcome.success:
                self._confirm(outcome.order)
            else:
                self.submission_error = outcome.message
                logger.warning("Order was not placed", user_id=self.buyer.user_id, reason=outcome.message)
            return outcome
        finally:
            self.is_submitting = False

    async def _submit(self, variables: dict) -> SubmissionOutcome:
        try:
            payload = await self.store.create_order(variables)
        except StoreError as exc:
            logger.warning("Order submission failed", user_id=self.buyer.user_id, error=str(exc))
            return transport_failure()
        except Exception:
            logger.exception("Unexpected error during order submission", user_id=self.buyer.user_id)
            return transport_failure()
        return interpret_order_response(payload)

    def _confirm(self, order: Order) -> None:
        self.placed_order = order
        self.step = CheckoutStep.CONFIRMATION
        # Card data must not outlive a placed order
        self.payment = PaymentDraft()
        self.errors = PaymentErrors()
        logger.info("Order placed", user_id=self.buyer.user_id, order_id=order.id)
