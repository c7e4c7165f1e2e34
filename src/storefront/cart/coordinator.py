"""Cart Mutation Coordinator — one-unit quantity changes against the remote store.

The remote store owns the cart. The coordinator keeps a read-through copy of
it, issues add/remove mutations one at a time, and re-reads the whole cart
after every successful mutation instead of trusting the mutation's reply.

Busy policy:
    A single ``is_processing`` flag covers the whole cart. While any mutation
    (and the re-fetch that follows it) is in flight, every quantity control is
    disabled and further mutations are refused.

Feedback:
    Every mutation ends with a per-item ``PendingMessage`` on the message
    board: the store's text (or a default) on success, a fixed failure text
    otherwise. A failed mutation does not re-fetch; the cart is presumed
    unchanged.
"""

from collections.abc import Awaitable, Callable

import structlog
from protean.exceptions import InvalidOperationError
from pydantic import ValidationError as SchemaValidationError

from storefront.cart.messages import MessageBoard, MessageKind, PendingMessage
from storefront.exceptions import StoreError
from storefront.shared.value_objects import CartItem, CheckoutHandoff, ItemType, Session
from storefront.store.port import RemoteStore
from storefront.store.schemas import MutationResult

logger = structlog.get_logger(__name__)

ADD_SUCCESS_DEFAULT = "Item added to cart!"
REMOVE_SUCCESS_DEFAULT = "Item removed from cart!"
ADD_FAILURE = "Failed to add item."
REMOVE_FAILURE = "Failed to remove item."


class CartMutationCoordinator:
    def __init__(self, session: Session, store: RemoteStore, board: MessageBoard | None = None) -> None:
        if session is None or not session.is_authenticated:
            raise InvalidOperationError("An authenticated buyer is required to change the cart")

        self.session = session
        self.store = store
        self.board = board or MessageBoard()
        self.is_processing = False
        self.load_error: str | None = None
        self._items: tuple[CartItem, ...] = ()

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def user_id(self) -> str:
        return self.session.user_id

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._items

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_price(self) -> float:
        return sum(item.subtotal for item in self._items)

    @property
    def controls_enabled(self) -> bool:
        return not self.is_processing

    def message_for(self, item_id: str) -> PendingMessage | None:
        return self.board.get(item_id)

    def checkout_handoff(self) -> CheckoutHandoff:
        """Snapshot handed to the checkout workflow."""
        return CheckoutHandoff(cart_items=self._items, total_price=self.total_price)

    async def refresh(self) -> tuple[CartItem, ...]:
        """Replace the local copy with the store's authoritative cart.

        On failure the previous copy is kept and ``load_error`` is set.
        """
        try:
            payload = await self.store.cart_items(self.user_id)
            items = tuple(CartItem.model_validate(item) for item in payload or ())
        except (StoreError, SchemaValidationError) as exc:
            self.load_error = f"Error loading cart: {exc}"
            logger.warning("Cart fetch failed", user_id=self.user_id, error=str(exc))
            return self._items
        except Exception as exc:
            self.load_error = f"Error loading cart: {exc}"
            logger.exception("Unexpected error while loading cart", user_id=self.user_id)
            return self._items

        self._items = items
        self.load_error = None
        return items

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    async def add_one(self, item_id: str, item_type: ItemType | str) -> PendingMessage:
        """Increase the item's quantity by one unit."""
        return await self._mutate(
            "add",
            self.store.add_to_cart,
            item_id,
            item_type,
            success_default=ADD_SUCCESS_DEFAULT,
            failure_text=ADD_FAILURE,
        )

    async def remove_one(self, item_id: str, item_type: ItemType | str) -> PendingMessage:
        """Decrease the item's quantity by one unit."""
        return await self._mutate(
            "remove",
            self.store.remove_from_cart,
            item_id,
            item_type,
            success_default=REMOVE_SUCCESS_DEFAULT,
            failure_text=REMOVE_FAILURE,
        )

    async def _mutate(
        self,
        operation: str,
        call: Callable[[str, str, str], Awaitable[dict]],
        item_id: str,
        item_type: ItemType | str,
        success_default: str,
        failure_text: str,
    ) -> PendingMessage:
        if self.is_processing:
            raise InvalidOperationError("Another cart update is still in progress")

        item_type = ItemType(item_type).value
        self.is_processing = True
        try:
            try:
                result = MutationResult.model_validate(await call(self.user_id, item_id, item_type))
            except (StoreError, SchemaValidationError) as exc:
                logger.warning("Cart mutation failed", operation=operation, item_id=item_id, error=str(exc))
                return self.board.post(item_id, failure_text, MessageKind.ERROR)
            except Exception:
                logger.exception("Unexpected error during cart mutation", operation=operation, item_id=item_id)
                return self.board.post(item_id, failure_text, MessageKind.ERROR)

            if not result.success:
                logger.warning(
                    "Cart mutation rejected",
                    operation=operation,
                    item_id=item_id,
                    reason=result.message,
                )
                return self.board.post(item_id, failure_text, MessageKind.ERROR)

            message = self.board.post(item_id, result.message or success_default, MessageKind.SUCCESS)
            logger.info("Cart mutation succeeded", operation=operation, item_id=item_id)
            await self.refresh()
            return message
        finally:
            self.is_processing = False
