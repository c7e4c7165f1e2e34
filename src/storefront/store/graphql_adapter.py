"""GraphQL remote store adapter.

Talks to the storefront's GraphQL endpoint over HTTP with an httpx
``AsyncClient``. Transport problems (timeouts, connection errors, non-2xx
statuses, undecodable bodies, top-level GraphQL ``errors``) are raised as
``StoreUnavailableError``; field payloads are returned untouched.
"""

from typing import Any

import httpx
import structlog

from storefront.exceptions import StoreUnavailableError
from storefront.store.port import RemoteStore

logger = structlog.get_logger(__name__)

VIEW_CART = """
query GetCartItems($userId: ID!) {
  cartItems(id: $userId) {
    itemId
    type
    name
    quantity
    price
    imageUrl
  }
}
"""

ADD_TO_CART = """
mutation AddToCart($userId: ID!, $itemId: ID!, $type: String!) {
  addToCart(userId: $userId, itemId: $itemId, type: $type) {
    success
    message
  }
}
"""

REMOVE_FROM_CART = """
mutation RemoveFromCart($userId: ID!, $itemId: ID!, $type: String!) {
  removeFromCart(userId: $userId, itemId: $itemId, type: $type) {
    success
    message
  }
}
"""

CREATE_ORDER = """
mutation CreateOrder(
  $userId: ID!
  $items: [CartItemInput!]!
  $totalPrice: Float!
  $billing: Address
  $shipping: Address
  $payment: PaymentInput!
) {
  createOrder(
    userId: $userId
    items: $items
    totalPrice: $totalPrice
    billing: $billing
    shipping: $shipping
    payment: $payment
  ) {
    success
    message
    order {
      id
      totalPrice
      createdAt
      items {
        itemId
        name
        type
        quantity
        price
        imageUrl
      }
    }
  }
}
"""


class GraphQLStore(RemoteStore):
    """Remote store backed by a GraphQL endpoint."""

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._client = client or httpx.AsyncClient(timeout=timeout, headers=headers)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _execute(self, operation: str, query: str, variables: dict[str, Any]) -> Any:
        try:
            response = await self._client.post(self.endpoint, json={"query": query, "variables": variables})
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            logger.warning("GraphQL request failed", operation=operation, error=str(exc))
            raise StoreUnavailableError(f"{operation} failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("GraphQL response is not JSON", operation=operation)
            raise StoreUnavailableError(f"{operation} returned an invalid body") from exc

        if not isinstance(body, dict):
            raise StoreUnavailableError(f"{operation} returned an invalid body")
        if body.get("errors"):
            messages = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in body["errors"]
            )
            logger.warning("GraphQL errors", operation=operation, errors=messages)
            raise StoreUnavailableError(f"{operation} failed: {messages}")

        data = body.get("data") or {}
        if not isinstance(data, dict):
            logger.warning("GraphQL data is not an object", operation=operation)
            raise StoreUnavailableError(f"{operation} returned an invalid body")
        return data.get(operation)

    async def cart_items(self, user_id: str) -> list[dict[str, Any]]:
        items = await self._execute("cartItems", VIEW_CART, {"userId": user_id})
        return items or []

    async def add_to_cart(self, user_id: str, item_id: str, item_type: str) -> dict[str, Any]:
        return await self._execute(
            "addToCart",
            ADD_TO_CART,
            {"userId": user_id, "itemId": item_id, "type": item_type},
        )

    async def remove_from_cart(self, user_id: str, item_id: str, item_type: str) -> dict[str, Any]:
        return await self._execute(
            "removeFromCart",
            REMOVE_FROM_CART,
            {"userId": user_id, "itemId": item_id, "type": item_type},
        )

    async def create_order(self, variables: dict[str, Any]) -> dict[str, Any] | None:
        return await self._execute("createOrder", CREATE_ORDER, variables)
