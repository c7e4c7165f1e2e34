"""Tests for createOrder request construction and reply interpretation."""

import pytest
from storefront.checkout.submission import (
    GENERIC_FAILURE,
    build_order_request,
    interpret_order_response,
    transport_failure,
)
from storefront.shared.value_objects import Address, CartItem


def _items():
    return (
        CartItem.model_validate(
            {
                "itemId": "b1",
                "type": "book",
                "name": "Dune",
                "quantity": 2,
                "price": 10.0,
                "imageUrl": "u",
                "__typename": "CartItem",
                "sellerId": "s-9",
            }
        ),
    )


class TestBuildOrderRequest:
    def test_only_allow_listed_fields_are_sent(self):
        billing = Address.model_validate(
            {
                "__typename": "Address",
                "type": "Home",
                "street": "1 Main St",
                "city": "X",
                "state": "Y",
                "zip": "1",
                "country": "US",
            }
        )
        variables = build_order_request(
            user_id="u-001",
            items=_items(),
            total_price=20.0,
            billing=billing,
            shipping=billing,
            card_number="4111 1111 1111 1111",
            expiry="12/30",
            cvv="123",
        )

        assert variables == {
            "userId": "u-001",
            "items": [
                {"itemId": "b1", "name": "Dune", "type": "book", "quantity": 2, "price": 10.0, "imageUrl": "u"}
            ],
            "totalPrice": 20.0,
            "billing": {"street": "1 Main St", "city": "X", "state": "Y", "zip": "1", "country": "US"},
            "shipping": {"street": "1 Main St", "city": "X", "state": "Y", "zip": "1", "country": "US"},
            "payment": {"cardNumber": "4111111111111111", "expiry": "12/30", "cvv": "123"},
        }


class TestInterpretOrderResponse:
    def test_success_with_order(self):
        outcome = interpret_order_response(
            {
                "success": True,
                "message": "Order created successfully",
                "order": {
                    "__typename": "Order",
                    "id": "o1",
                    "totalPrice": 20.0,
                    "createdAt": "2026-10-19T10:00:00Z",
                    "items": [{"itemId": "b1", "type": "book", "name": "Dune", "quantity": 2, "price": 10.0}],
                },
            }
        )
        assert outcome.success is True
        assert outcome.order.id == "o1"
        assert outcome.order.created_at == "2026-10-19T10:00:00Z"
        assert outcome.order.items[0].item_id == "b1"

    def test_numeric_identifiers_and_timestamps_are_kept_as_text(self):
        outcome = interpret_order_response(
            {"success": True, "order": {"id": 42, "totalPrice": 1, "createdAt": 1760868000000}}
        )
        assert outcome.success is True
        assert outcome.order.id == "42"
        assert outcome.order.created_at == "1760868000000"

    def test_reported_failure_surfaces_message_verbatim(self):
        outcome = interpret_order_response({"success": False, "message": "Card declined", "order": None})
        assert outcome.success is False
        assert outcome.message == "Card declined"
        assert outcome.order is None

    def test_reported_failure_without_message_uses_fallback(self):
        outcome = interpret_order_response({"success": False, "message": ""})
        assert outcome.message == GENERIC_FAILURE

    def test_success_without_order_is_a_failure(self):
        outcome = interpret_order_response({"success": True, "message": "ok", "order": None})
        assert outcome.success is False
        assert outcome.message == GENERIC_FAILURE

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            "nope",
            42,
            [],
            {},
            {"message": "missing success"},
            {"success": True, "order": {"totalPrice": 5}},
            {"success": True, "order": "o1"},
        ],
    )
    def test_malformed_replies_never_raise(self, payload):
        outcome = interpret_order_response(payload)
        assert outcome.success is False
        assert outcome.message == GENERIC_FAILURE

    def test_transport_failure(self):
        assert transport_failure().success is False
        assert transport_failure().message == GENERIC_FAILURE
