"""BDD tests for the checkout wizard."""

from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/checkout_wizard.feature")


# ---------------------------------------------------------------------------
# Given and When steps
# ---------------------------------------------------------------------------
@given("the buyer ships to a different address")
def _(checkout):
    checkout.set_use_same_address(False)


@when("the buyer enters a shipping address without a street")
def _(checkout):
    for field, value in {"street": "", "city": "X", "state": "Y", "zip": "1", "country": "US"}.items():
        checkout.edit_shipping(field, value)


@when(parsers.cfparse('the shipping street is set to "{street}"'))
def _(checkout, street):
    checkout.edit_shipping("street", street)


@when("the buyer tries to continue to payment")
def _(checkout, error):
    try:
        checkout.continue_to_payment()
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the buyer enters card "{card_number}" expiring "{expiry}" with CVV "{cvv}"'))
def _(checkout, card_number, expiry, cvv):
    checkout.enter_card_number(card_number)
    checkout.enter_expiry(expiry)
    checkout.enter_cvv(cvv)


@when("the buyer places the order", target_fixture="outcome")
def _(checkout, loop, error):
    try:
        return loop.run_until_complete(checkout.place_order())
    except ValidationError as exc:
        error["exc"] = exc
        return None


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the expiry error reads "{message}"'))
def _(checkout, message):
    assert checkout.errors.expiry == message


@then("the order cannot be placed")
def _(checkout):
    assert checkout.can_place_order is False


@then(parsers.cfparse('the placed order id is "{order_id}"'))
def _(checkout, outcome, order_id):
    assert outcome.success is True
    assert checkout.placed_order.id == order_id


@then(parsers.cfparse('the submission error reads "{message}"'))
def _(checkout, outcome, message):
    assert outcome.success is False
    assert checkout.submission_error == message


@then(parsers.cfparse('the card number field shows "{value}"'))
def _(checkout, value):
    assert checkout.payment.card_number == value


@then(parsers.cfparse('the expiry field shows "{value}"'))
def _(checkout, value):
    assert checkout.payment.expiry == value


@then(parsers.cfparse('the CVV field shows "{value}"'))
def _(checkout, value):
    assert checkout.payment.cvv == value
