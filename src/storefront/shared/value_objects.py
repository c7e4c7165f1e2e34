"""Value objects shared by the cart and checkout workflows.

All value objects are immutable. Inbound payloads are parsed leniently:
camelCase wire names are accepted alongside snake_case, and unknown keys
(``__typename`` and any other transport-injected field) are dropped, so they
can never leak back into an outbound request.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ADDRESS_FIELDS = ("street", "city", "state", "zip", "country")


class ItemType(Enum):
    BOOK = "book"
    HOME = "home"


class ValueObject(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Addresses and buyer identity
# ---------------------------------------------------------------------------
class Address(ValueObject):
    """A postal address, either billing (profile, read-only) or shipping.

    ``label`` is the profile's name for the address ("Home", "Work") and is
    only used for display; it is never sent with an order.
    """

    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    label: str | None = Field(default=None, alias="type")

    @field_validator(*ADDRESS_FIELDS, mode="before")
    @classmethod
    def _none_as_blank(cls, value):
        return "" if value is None else value

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, name).strip() for name in ADDRESS_FIELDS)

    def replace(self, **changes) -> "Address":
        unknown = set(changes) - set(ADDRESS_FIELDS)
        if unknown:
            raise ValueError(f"Unknown address fields: {sorted(unknown)}")
        return self.model_copy(update=changes)

    def to_input(self) -> dict[str, str]:
        """Outbound form: exactly the five address fields."""
        return {name: getattr(self, name) for name in ADDRESS_FIELDS}

    def display_label(self) -> str:
        text = f"{self.street}, {self.city}, {self.state}, {self.zip}"
        return f"{self.label}: {text}" if self.label else text


class Session(ValueObject):
    """The current buyer, injected into the workflow at construction."""

    user_id: str | None = None
    billing_addresses: tuple[Address, ...] = ()
    shipping_addresses: tuple[Address, ...] = ()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


# ---------------------------------------------------------------------------
# Cart and order
# ---------------------------------------------------------------------------
class CartItem(ValueObject):
    item_id: str
    item_type: ItemType = Field(alias="type")
    name: str = ""
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    image_url: str | None = None

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    def to_input(self) -> dict:
        return {
            "itemId": self.item_id,
            "name": self.name,
            "type": self.item_type.value,
            "quantity": self.quantity,
            "price": self.price,
            "imageUrl": self.image_url,
        }


class CheckoutHandoff(ValueObject):
    """Snapshot of the cart handed to checkout at navigation time."""

    cart_items: tuple[CartItem, ...] = ()
    total_price: float = 0.0


class Order(ValueObject):
    """An order as reported by the remote store. Display only."""

    id: str
    total_price: float = 0.0
    created_at: str | None = None
    items: tuple[CartItem, ...] = ()

    @field_validator("id", "created_at", mode="before")
    @classmethod
    def _as_text(cls, value):
        return value if value is None else str(value)
