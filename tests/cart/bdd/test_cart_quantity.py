"""BDD tests for cart quantity controls."""

import asyncio

from pytest_bdd import parsers, scenarios, when

scenarios("features/cart_quantity.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the buyer adds one unit of book "{item_id}"'))
def _(cart, loop, item_id):
    loop.run_until_complete(cart.add_one(item_id, "book"))


@when(parsers.cfparse('the buyer removes one unit of book "{item_id}"'))
def _(cart, loop, item_id):
    loop.run_until_complete(cart.remove_one(item_id, "book"))


@when("the store starts accepting cart changes")
def _(cart):
    cart.store.configure(should_succeed=True)


@when("the message lifetime passes")
def _(cart, loop):
    loop.run_until_complete(asyncio.sleep(cart.board.ttl * 2))
