"""Remote store factory.

Provides get_store() / set_store() to swap implementations:
- FakeStore for development and testing (default)
- GraphQLStore for a running storefront backend (STORE_ADAPTER=graphql)
"""

from storefront.config import load_settings
from storefront.store.port import RemoteStore

_current_store: RemoteStore | None = None


def get_store() -> RemoteStore:
    """Return the configured remote store (singleton)."""
    global _current_store
    if _current_store is None:
        settings = load_settings()
        if settings.store_adapter == "fake":
            from storefront.store.fake_adapter import FakeStore

            _current_store = FakeStore()
        elif settings.store_adapter == "graphql":
            from storefront.store.graphql_adapter import GraphQLStore

            _current_store = GraphQLStore(settings.graphql_url, timeout=settings.graphql_timeout)
        else:
            raise ValueError(f"Unknown store adapter: {settings.store_adapter}")
    return _current_store


def set_store(store: RemoteStore) -> None:
    """Override the active remote store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    """Reset to the configured default store."""
    global _current_store
    _current_store = None


async def close_store() -> None:
    """Release the active store's connections and forget it."""
    global _current_store
    if _current_store is not None:
        await _current_store.aclose()
    _current_store = None
