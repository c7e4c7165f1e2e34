"""Pydantic schemas for remote store responses.

These are external contracts (anti-corruption layer): the store's replies are
parsed here before any of their content reaches the workflow.
"""

from pydantic import BaseModel, ConfigDict

from storefront.shared.value_objects import Order


class StoreResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MutationResult(StoreResponse):
    """Reply to addToCart / removeFromCart."""

    success: bool
    message: str | None = None


class CreateOrderResult(StoreResponse):
    """Reply to createOrder."""

    success: bool
    message: str | None = None
    order: Order | None = None
