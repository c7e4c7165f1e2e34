"""Remote store port (abstract interface).

The remote store is the service of record for carts and orders. Adapters
return the payloads exactly as the store sent them; the workflow validates
their shape itself and never trusts a mutation's response body for final
cart state.

Adapters raise ``StoreUnavailableError`` for transport failures and return
normally for anything the store reported, successful or not.
"""

from abc import ABC, abstractmethod
from typing import Any


class RemoteStore(ABC):
    """Abstract remote store interface."""

    @abstractmethod
    async def cart_items(self, user_id: str) -> list[dict[str, Any]]:
        """Return the buyer's authoritative cart.

        Returns:
            list of dicts with keys: itemId, type, name, quantity, price, imageUrl
        """
        ...

    @abstractmethod
    async def add_to_cart(self, user_id: str, item_id: str, item_type: str) -> dict[str, Any]:
        """Increase the item's quantity by one.

        Returns:
            dict with keys: success (bool), message (str)
        """
        ...

    @abstractmethod
    async def remove_from_cart(self, user_id: str, item_id: str, item_type: str) -> dict[str, Any]:
        """Decrease the item's quantity by one. A no-op for absent items.

        Returns:
            dict with keys: success (bool), message (str)
        """
        ...

    @abstractmethod
    async def create_order(self, variables: dict[str, Any]) -> dict[str, Any] | None:
        """Create an order from the checkout variables.

        ``variables`` holds userId, items, totalPrice, billing, shipping and
        payment, already reduced to the allow-listed fields.

        Returns:
            dict with keys: success (bool), message (str), order (dict or None)
        """
        ...

    async def aclose(self) -> None:
        """Release any connections held by the adapter."""
        return None
