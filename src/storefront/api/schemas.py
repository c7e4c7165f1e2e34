"""Pydantic request/response schemas for the storefront HTTP API.

These are external contracts for the browser front end, kept separate from
the workflow's own value objects.
"""

from pydantic import BaseModel, Field

from storefront.cart.coordinator import CartMutationCoordinator
from storefront.checkout.card_input import mask_card_number
from storefront.checkout.session import CheckoutSession
from storefront.checkout.submission import SubmissionOutcome
from storefront.shared.value_objects import Address, ItemType, Order


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    type: str | None = None

    @classmethod
    def from_address(cls, address: Address) -> "AddressSchema":
        return cls(**address.to_input(), type=address.label)


class CartItemSchema(BaseModel):
    item_id: str
    type: ItemType
    name: str
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    image_url: str | None = None


class OrderSchema(BaseModel):
    id: str
    total_price: float
    created_at: str | None = None
    items: list[CartItemSchema] = []

    @classmethod
    def from_order(cls, order: Order) -> "OrderSchema":
        return cls(
            id=order.id,
            total_price=order.total_price,
            created_at=order.created_at,
            items=[
                CartItemSchema(
                    item_id=item.item_id,
                    type=item.item_type.value,
                    name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                    image_url=item.image_url,
                )
                for item in order.items
            ],
        )


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class QuantityChangeRequest(BaseModel):
    type: str = Field(pattern="^(book|home)$")


class CartMessageSchema(BaseModel):
    text: str
    kind: str


class CartLineSchema(CartItemSchema):
    subtotal: float
    message: CartMessageSchema | None = None


class CartResponse(BaseModel):
    items: list[CartLineSchema]
    total_price: float
    item_count: int
    is_processing: bool
    load_error: str | None = None

    @classmethod
    def from_coordinator(cls, cart: CartMutationCoordinator) -> "CartResponse":
        lines = []
        for item in cart.items:
            message = cart.message_for(item.item_id)
            lines.append(
                CartLineSchema(
                    item_id=item.item_id,
                    type=item.item_type.value,
                    name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                    image_url=item.image_url,
                    subtotal=item.subtotal,
                    message=CartMessageSchema(text=message.text, kind=message.kind.value) if message else None,
                )
            )
        return cls(
            items=lines,
            total_price=cart.total_price,
            item_count=cart.item_count,
            is_processing=cart.is_processing,
            load_error=cart.load_error,
        )


# ---------------------------------------------------------------------------
# Checkout Request Schemas
# ---------------------------------------------------------------------------
class BuyerSchema(BaseModel):
    user_id: str
    billing_addresses: list[AddressSchema] = []
    shipping_addresses: list[AddressSchema] = []


class StartCheckoutRequest(BaseModel):
    buyer: BuyerSchema
    cart_items: list[CartItemSchema] | None = None
    total_price: float | None = Field(default=None, ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "buyer": {
                        "user_id": "u-001",
                        "billing_addresses": [
                            {"street": "1 Main St", "city": "Springfield", "state": "IL", "zip": "62701", "country": "US"}
                        ],
                        "shipping_addresses": [],
                    },
                    "cart_items": [
                        {"item_id": "b1", "type": "book", "name": "Dune", "quantity": 2, "price": 10.0}
                    ],
                    "total_price": 20.0,
                }
            ]
        }
    }


class SelectAddressRequest(BaseModel):
    index: int = Field(ge=0)


class UpdateShippingRequest(BaseModel):
    use_same_address: bool | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None


class UpdatePaymentRequest(BaseModel):
    card_number: str | None = None
    expiry: str | None = None
    cvv: str | None = None


# ---------------------------------------------------------------------------
# Checkout Response Schemas
# ---------------------------------------------------------------------------
class ShippingOptionSchema(BaseModel):
    index: int
    label: str


class PaymentSchema(BaseModel):
    """Payment form state. The card number is masked and the CVV is never echoed."""

    card_number: str
    expiry: str
    cvv_entered: bool


class PaymentErrorsSchema(BaseModel):
    card_number: str | None = None
    expiry: str | None = None
    cvv: str | None = None


class SummaryLineSchema(BaseModel):
    item_id: str
    name: str
    type: str
    quantity: int
    subtotal: float
    image_url: str | None = None


class CheckoutResponse(BaseModel):
    checkout_id: str
    step: str
    billing: AddressSchema
    shipping: AddressSchema
    use_same_address: bool
    shipping_options: list[ShippingOptionSchema]
    payment: PaymentSchema
    errors: PaymentErrorsSchema
    can_continue: bool
    can_place_order: bool
    is_submitting: bool
    submission_error: str | None = None
    order: OrderSchema | None = None
    lines: list[SummaryLineSchema]
    total_price: float

    @classmethod
    def from_session(cls, checkout_id: str, checkout: CheckoutSession) -> "CheckoutResponse":
        summary = checkout.order_summary()
        return cls(
            checkout_id=checkout_id,
            step=checkout.step.value,
            billing=AddressSchema.from_address(checkout.billing),
            shipping=AddressSchema.from_address(checkout.shipping),
            use_same_address=checkout.use_same_address,
            shipping_options=[
                ShippingOptionSchema(index=index, label=address.display_label())
                for index, address in enumerate(checkout.shipping_options)
            ],
            payment=PaymentSchema(
                card_number=mask_card_number(checkout.payment.card_number),
                expiry=checkout.payment.expiry,
                cvv_entered=bool(checkout.payment.cvv),
            ),
            errors=PaymentErrorsSchema(
                card_number=checkout.errors.card_number,
                expiry=checkout.errors.expiry,
                cvv=checkout.errors.cvv,
            ),
            can_continue=checkout.can_continue,
            can_place_order=checkout.can_place_order,
            is_submitting=checkout.is_submitting,
            submission_error=checkout.submission_error,
            order=OrderSchema.from_order(checkout.placed_order) if checkout.placed_order else None,
            lines=[
                SummaryLineSchema(
                    item_id=line.item_id,
                    name=line.name,
                    type=line.item_type,
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                    image_url=line.image_url,
                )
                for line in summary.lines
            ],
            total_price=summary.total_price,
        )


class PlaceOrderResponse(BaseModel):
    success: bool
    message: str
    checkout: CheckoutResponse

    @classmethod
    def from_outcome(cls, outcome: SubmissionOutcome, checkout: CheckoutResponse) -> "PlaceOrderResponse":
        return cls(success=outcome.success, message=outcome.message, checkout=checkout)
