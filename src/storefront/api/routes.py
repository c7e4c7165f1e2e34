"""FastAPI routes for the storefront — cart quantity controls and checkout wizard."""

from fastapi import APIRouter, Header, HTTPException

from storefront.api.registry import get_registry
from storefront.api.schemas import (
    CartResponse,
    CheckoutResponse,
    PlaceOrderResponse,
    QuantityChangeRequest,
    SelectAddressRequest,
    StartCheckoutRequest,
    UpdatePaymentRequest,
    UpdateShippingRequest,
)
from storefront.checkout.session import CheckoutSession
from storefront.shared.value_objects import Address, CartItem, CheckoutHandoff, Session
from storefront.store import get_store


def _checkout_or_404(checkout_id: str) -> CheckoutSession:
    try:
        return get_registry().checkout(checkout_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Checkout not found") from None


def _require_user(x_user_id: str) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Please log in to view your cart")
    return x_user_id


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(x_user_id: str = Header(default="")) -> CartResponse:
    cart = get_registry().cart_for(_require_user(x_user_id), get_store())
    await cart.refresh()
    return CartResponse.from_coordinator(cart)


@cart_router.post("/items/{item_id}/increment", response_model=CartResponse)
async def increment_item(
    item_id: str,
    body: QuantityChangeRequest,
    x_user_id: str = Header(default=""),
) -> CartResponse:
    cart = get_registry().cart_for(_require_user(x_user_id), get_store())
    await cart.add_one(item_id, body.type)
    return CartResponse.from_coordinator(cart)


@cart_router.post("/items/{item_id}/decrement", response_model=CartResponse)
async def decrement_item(
    item_id: str,
    body: QuantityChangeRequest,
    x_user_id: str = Header(default=""),
) -> CartResponse:
    cart = get_registry().cart_for(_require_user(x_user_id), get_store())
    await cart.remove_one(item_id, body.type)
    return CartResponse.from_coordinator(cart)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkouts", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
async def start_checkout(body: StartCheckoutRequest) -> CheckoutResponse:
    """Open a checkout session.

    The cart snapshot comes from the request when given, otherwise from the
    buyer's live cart; with neither the session starts empty.
    """
    registry = get_registry()
    session = Session(
        user_id=body.buyer.user_id,
        billing_addresses=tuple(Address.model_validate(a.model_dump()) for a in body.buyer.billing_addresses),
        shipping_addresses=tuple(Address.model_validate(a.model_dump()) for a in body.buyer.shipping_addresses),
    )
    if body.cart_items is not None:
        items = tuple(CartItem.model_validate(item.model_dump()) for item in body.cart_items)
        total = body.total_price if body.total_price is not None else sum(item.subtotal for item in items)
        handoff = CheckoutHandoff(cart_items=items, total_price=total)
    else:
        handoff = registry.handoff_for(body.buyer.user_id)

    checkout_id, checkout = registry.open_checkout(session, handoff, get_store())
    return CheckoutResponse.from_session(checkout_id, checkout)


@checkout_router.get("/{checkout_id}", response_model=CheckoutResponse)
async def view_checkout(checkout_id: str) -> CheckoutResponse:
    return CheckoutResponse.from_session(checkout_id, _checkout_or_404(checkout_id))


@checkout_router.post("/{checkout_id}/shipping/select", response_model=CheckoutResponse)
async def select_shipping_address(checkout_id: str, body: SelectAddressRequest) -> CheckoutResponse:
    checkout = _checkout_or_404(checkout_id)
    checkout.select_shipping_address(body.index)
    return CheckoutResponse.from_session(checkout_id, checkout)


@checkout_router.put("/{checkout_id}/shipping", response_model=CheckoutResponse)
async def update_shipping(checkout_id: str, body: UpdateShippingRequest) -> CheckoutResponse:
    checkout = _checkout_or_404(checkout_id)
    changes = body.model_dump(exclude_unset=True)
    use_same = changes.pop("use_same_address", None)
    if use_same is not None:
        checkout.set_use_same_address(use_same)
    for field, value in changes.items():
        checkout.edit_shipping(field, value)
    return CheckoutResponse.from_session(checkout_id, checkout)


@checkout_router.post("/{checkout_id}/continue", response_model=CheckoutResponse)
async def continue_to_payment(checkout_id: str) -> CheckoutResponse:
    checkout = _checkout_or_404(checkout_id)
    checkout.continue_to_payment()
    return CheckoutResponse.from_session(checkout_id, checkout)


@checkout_router.post("/{checkout_id}/back", response_model=CheckoutResponse)
async def back_to_shipping(checkout_id: str) -> CheckoutResponse:
    checkout = _checkout_or_404(checkout_id)
    checkout.back()
    return CheckoutResponse.from_session(checkout_id, checkout)


@checkout_router.put("/{checkout_id}/payment", response_model=CheckoutResponse)
async def update_payment(checkout_id: str, body: UpdatePaymentRequest) -> CheckoutResponse:
    checkout = _checkout_or_404(checkout_id)
    if body.card_number is not None:
        checkout.enter_card_number(body.card_number)
    if body.expiry is not None:
        checkout.enter_expiry(body.expiry)
    if body.cvv is not None:
        checkout.enter_cvv(body.cvv)
    return CheckoutResponse.from_session(checkout_id, checkout)


@checkout_router.post("/{checkout_id}/orders", response_model=PlaceOrderResponse)
async def place_order(checkout_id: str) -> PlaceOrderResponse:
    """Place the order.

    A declined order keeps the checkout on the payment step. A confirmed
    checkout is returned one last time and then forgotten.
    """
    checkout = _checkout_or_404(checkout_id)
    outcome = await checkout.place_order()
    response = PlaceOrderResponse.from_outcome(outcome, CheckoutResponse.from_session(checkout_id, checkout))
    if checkout.is_confirmed:
        get_registry().close_checkout(checkout_id)
    return response
