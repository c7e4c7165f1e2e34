"""Storefront — cart-to-order transaction workflow.

Cart quantity mutation with transient per-item feedback, and the three-step
checkout wizard (Shipping → Payment → Confirmation) that submits an order
exactly once per confirmation. Catalogue, wishlist and seller screens are
reached only through the remote store port.
"""

__version__ = "0.1.0"
