"""Configurable in-memory remote store for development and testing.

Simulates the storefront's GraphQL service without any network calls. It can
be configured at runtime to report failures, raise transport errors, return
arbitrary (even malformed) order replies, or hold calls in flight until
released, which makes busy-state behavior observable in tests.
"""

import asyncio
import copy
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from storefront.exceptions import StoreUnavailableError
from storefront.store.port import RemoteStore

_UNSET = object()


class FakeStore(RemoteStore):
    """In-memory store keyed by user id."""

    def __init__(self, catalogue: dict[str, dict] | None = None) -> None:
        self.catalogue: dict[str, dict] = dict(catalogue or {})
        self.carts: dict[str, dict[str, dict]] = {}
        self.orders: list[dict] = []
        self.calls: list[dict] = []

        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.unavailable: bool = False
        self.mutation_message = _UNSET
        self.order_response: Any = _UNSET

        self._released = asyncio.Event()
        self._released.set()

    # -------------------------------------------------------------------
    # Test controls
    # -------------------------------------------------------------------
    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Card declined",
        unavailable: bool = False,
    ) -> None:
        """Configure store behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.unavailable = unavailable

    def reply_to_orders_with(self, payload: Any) -> None:
        """Return ``payload`` verbatim from every createOrder call."""
        self.order_response = payload

    def reply_to_mutations_with(self, message: str | None) -> None:
        """Override the message text of successful cart mutations."""
        self.mutation_message = message

    def seed_cart(self, user_id: str, items: list[dict]) -> None:
        self.carts[user_id] = {item["itemId"]: dict(item) for item in items}
        for item in items:
            self.catalogue.setdefault(item["itemId"], {k: v for k, v in item.items() if k != "quantity"})

    def hold(self) -> None:
        """Keep every subsequent call in flight until ``release()``."""
        self._released.clear()

    def release(self) -> None:
        self._released.set()

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    async def _enter(self, call: dict) -> None:
        self.calls.append(call)
        await self._released.wait()
        if self.unavailable:
            raise StoreUnavailableError("Remote store unavailable")

    # -------------------------------------------------------------------
    # RemoteStore
    # -------------------------------------------------------------------
    async def cart_items(self, user_id: str) -> list[dict[str, Any]]:
        await self._enter({"method": "cart_items", "user_id": user_id})
        return [copy.deepcopy(item) for item in self.carts.get(user_id, {}).values()]

    async def add_to_cart(self, user_id: str, item_id: str, item_type: str) -> dict[str, Any]:
        await self._enter({"method": "add_to_cart", "user_id": user_id, "item_id": item_id, "type": item_type})
        if not self.should_succeed:
            return {"success": False, "message": self.failure_reason}

        cart = self.carts.setdefault(user_id, {})
        if item_id in cart:
            cart[item_id]["quantity"] += 1
        elif item_id in self.catalogue:
            cart[item_id] = {**self.catalogue[item_id], "itemId": item_id, "type": item_type, "quantity": 1}
        else:
            return {"success": False, "message": "Item not found"}
        return {"success": True, "message": self._message("Item added to cart!")}

    async def remove_from_cart(self, user_id: str, item_id: str, item_type: str) -> dict[str, Any]:
        await self._enter({"method": "remove_from_cart", "user_id": user_id, "item_id": item_id, "type": item_type})
        if not self.should_succeed:
            return {"success": False, "message": self.failure_reason}

        cart = self.carts.setdefault(user_id, {})
        if item_id in cart:
            cart[item_id]["quantity"] -= 1
            if cart[item_id]["quantity"] <= 0:
                del cart[item_id]
        return {"success": True, "message": self._message("Item removed from cart!")}

    async def create_order(self, variables: dict[str, Any]) -> dict[str, Any] | None:
        await self._enter({"method": "create_order", "variables": copy.deepcopy(variables)})
        if self.order_response is not _UNSET:
            return self.order_response
        if not self.should_succeed:
            return {"success": False, "message": self.failure_reason, "order": None}

        order = {
            "id": f"order-{uuid4().hex[:12]}",
            "totalPrice": variables["totalPrice"],
            "createdAt": datetime.now(UTC).isoformat(),
            "items": copy.deepcopy(variables["items"]),
        }
        self.orders.append(order)
        self.carts.pop(variables["userId"], None)
        return {"success": True, "message": "Order created successfully", "order": order}

    def _message(self, default: str) -> str | None:
        return default if self.mutation_message is _UNSET else self.mutation_message
