"""Shared BDD fixtures and step definitions for checkout."""

from datetime import date

import pytest
from pytest_bdd import given, parsers, then
from storefront.checkout.session import CheckoutSession
from storefront.shared.value_objects import CartItem, CheckoutHandoff, Session
from storefront.store.fake_adapter import FakeStore

TODAY = date(2026, 10, 19)


def _handoff(quantity=2, item_id="b1", price=10.0):
    item = CartItem(item_id=item_id, item_type="book", name="Dune", quantity=quantity, price=price)
    return CheckoutHandoff(cart_items=(item,), total_price=quantity * price)


@pytest.fixture()
def error():
    """Container to capture exceptions from When steps."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        'a buyer with no saved addresses checking out {quantity:d} units of book "{item_id}" priced {price:f}'
    ),
    target_fixture="checkout",
)
def _(quantity, item_id, price):
    buyer = Session(user_id="u-002")
    return CheckoutSession(buyer, _handoff(quantity, item_id, price), FakeStore(), today=lambda: TODAY)


@given("a checkout on the payment step", target_fixture="checkout")
def _(buyer, store):
    checkout = CheckoutSession(buyer, _handoff(), store, today=lambda: TODAY)
    checkout.continue_to_payment()
    return checkout


@given(parsers.cfparse('the store confirms orders as "{order_id}"'))
def _(checkout, order_id):
    checkout.store.reply_to_orders_with(
        {
            "success": True,
            "message": "Order created successfully",
            "order": {
                "id": order_id,
                "totalPrice": checkout.total_price,
                "createdAt": "2026-10-19T12:00:00Z",
                "items": [],
            },
        }
    )


@given(parsers.cfparse('the store declines orders with "{message}"'))
def _(checkout, message):
    checkout.store.reply_to_orders_with({"success": False, "message": message, "order": None})


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the checkout is on the {step} step"))
def _(checkout, step):
    assert checkout.step.value == step


@then(parsers.cfparse('the checkout reports "{message}" for {field}'))
def _(error, message, field):
    assert error["exc"] is not None
    assert message in error["exc"].messages[field]


@then(parsers.cfparse("{count:d} orders were submitted"))
def _(checkout, count):
    assert len(checkout.store.calls_to("create_order")) == count
