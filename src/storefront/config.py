"""Runtime configuration read from the environment.

    STOREFRONT_ENV              development | test | staging | production
    STORE_ADAPTER               fake (default) | graphql
    STOREFRONT_GRAPHQL_URL      GraphQL endpoint for the graphql adapter
    STOREFRONT_GRAPHQL_TIMEOUT  request timeout in seconds (default 10)
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    store_adapter: str = "fake"
    graphql_url: str = "http://localhost:8080/graphql"
    graphql_timeout: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def load_settings() -> Settings:
    """Read settings from the current environment (never cached)."""
    return Settings(
        env=os.environ.get("STOREFRONT_ENV", "development").lower(),
        store_adapter=os.environ.get("STORE_ADAPTER", "fake").lower(),
        graphql_url=os.environ.get("STOREFRONT_GRAPHQL_URL", "http://localhost:8080/graphql"),
        graphql_timeout=float(os.environ.get("STOREFRONT_GRAPHQL_TIMEOUT", "10")),
    )
