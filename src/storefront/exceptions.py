"""Remote store exceptions.

Domain errors are Protean's ``ValidationError`` and ``InvalidOperationError``.
The errors here are raised only by remote store adapters; the cart
coordinator and the checkout session catch them at the call site and convert
them into per-item messages or submission failures.
"""


class StoreError(Exception):
    """A remote store call failed."""


class StoreUnavailableError(StoreError):
    """The remote store could not be reached or returned a transport error."""
