"""Shared BDD fixtures and step definitions for the cart."""

from pytest_bdd import given, parsers, then
from storefront.cart.coordinator import CartMutationCoordinator
from storefront.cart.messages import MessageBoard
from storefront.store.fake_adapter import FakeStore

MESSAGE_TTL = 0.05


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a cart holding {quantity:d} units of book "{item_id}" priced {price:f}'),
    target_fixture="cart",
)
def _(buyer, loop, quantity, item_id, price):
    store = FakeStore()
    store.seed_cart(
        buyer.user_id,
        [{"itemId": item_id, "type": "book", "name": item_id, "quantity": quantity, "price": price, "imageUrl": None}],
    )
    cart = CartMutationCoordinator(buyer, store, board=MessageBoard(ttl=MESSAGE_TTL))
    loop.run_until_complete(cart.refresh())
    return cart


@given(parsers.cfparse('the store replies "{message}" to cart changes'))
def _(cart, message):
    cart.store.reply_to_mutations_with(message)


@given("the store rejects cart changes")
def _(cart):
    cart.store.configure(should_succeed=False, failure_reason="Out of stock")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the message for "{item_id}" reads "{text}"'))
def _(cart, item_id, text):
    assert cart.message_for(item_id) is not None
    assert cart.message_for(item_id).text == text


@then(parsers.cfparse('there is no message for "{item_id}"'))
def _(cart, item_id):
    assert cart.message_for(item_id) is None


@then(parsers.cfparse('"{item_id}" has quantity {quantity:d}'))
def _(cart, item_id, quantity):
    assert {item.item_id: item.quantity for item in cart.items}[item_id] == quantity


@then(parsers.cfparse("the cart has been fetched {count:d} times"))
def _(cart, count):
    assert len(cart.store.calls_to("cart_items")) == count
