"""In-memory registry of live cart coordinators and checkout sessions.

Everything held here is scoped to one buyer's session and lives only as long
as the process; nothing is persisted. A checkout is dropped as soon as its
order is confirmed, and both maps are capped: once full, the least recently
used entry is evicted.
"""

from collections import OrderedDict
from uuid import uuid4

import structlog

from storefront.cart.coordinator import CartMutationCoordinator
from storefront.checkout.session import CheckoutSession
from storefront.shared.value_objects import CheckoutHandoff, Session
from storefront.store.port import RemoteStore

logger = structlog.get_logger(__name__)

MAX_CARTS = 1000
MAX_OPEN_CHECKOUTS = 1000


class WorkflowRegistry:
    def __init__(self, max_carts: int = MAX_CARTS, max_checkouts: int = MAX_OPEN_CHECKOUTS) -> None:
        self.max_carts = max_carts
        self.max_checkouts = max_checkouts
        self.carts: OrderedDict[str, CartMutationCoordinator] = OrderedDict()
        self.checkouts: OrderedDict[str, CheckoutSession] = OrderedDict()

    def cart_for(self, user_id: str, store: RemoteStore) -> CartMutationCoordinator:
        cart = self.carts.get(user_id)
        if cart is not None:
            self.carts.move_to_end(user_id)
            return cart

        cart = CartMutationCoordinator(Session(user_id=user_id), store)
        self.carts[user_id] = cart
        while len(self.carts) > self.max_carts:
            evicted_id, evicted = self.carts.popitem(last=False)
            evicted.board.clear()
            logger.debug("Cart evicted from registry", user_id=evicted_id)
        return cart

    def handoff_for(self, user_id: str) -> CheckoutHandoff | None:
        cart = self.carts.get(user_id)
        return cart.checkout_handoff() if cart is not None else None

    def open_checkout(
        self,
        session: Session,
        handoff: CheckoutHandoff | None,
        store: RemoteStore,
    ) -> tuple[str, CheckoutSession]:
        checkout_id = uuid4().hex
        checkout = CheckoutSession(session, handoff, store)
        self.checkouts[checkout_id] = checkout
        while len(self.checkouts) > self.max_checkouts:
            evicted_id, _ = self.checkouts.popitem(last=False)
            logger.debug("Checkout evicted from registry", checkout_id=evicted_id)
        return checkout_id, checkout

    def checkout(self, checkout_id: str) -> CheckoutSession:
        checkout = self.checkouts.get(checkout_id)
        if checkout is None:
            raise KeyError(checkout_id)
        self.checkouts.move_to_end(checkout_id)
        return checkout

    def close_checkout(self, checkout_id: str) -> None:
        """Forget a checkout once its order is placed."""
        self.checkouts.pop(checkout_id, None)

    def clear(self) -> None:
        for cart in self.carts.values():
            cart.board.clear()
        self.carts.clear()
        self.checkouts.clear()


_registry: WorkflowRegistry | None = None


def get_registry() -> WorkflowRegistry:
    global _registry
    if _registry is None:
        _registry = WorkflowRegistry()
    return _registry


def reset_registry() -> None:
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = None
