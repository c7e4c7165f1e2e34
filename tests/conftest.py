import asyncio
from pathlib import Path

import pytest
from storefront.api.registry import reset_registry
from storefront.shared.value_objects import Address, Session
from storefront.store import reset_store, set_store
from storefront.store.fake_adapter import FakeStore

BOOK = {
    "itemId": "b1",
    "type": "book",
    "name": "Dune",
    "quantity": 2,
    "price": 10.0,
    "imageUrl": "https://img.example.com/b1.png",
}
LAMP = {
    "itemId": "h1",
    "type": "home",
    "name": "Desk Lamp",
    "quantity": 1,
    "price": 24.5,
    "imageUrl": "https://img.example.com/h1.png",
}

BILLING = Address(street="1 Main St", city="Springfield", state="IL", zip="62701", country="US")
HOME = Address(label="Home", street="9 Elm Rd", city="Shelbyville", state="IL", zip="62565", country="US")
WORK = Address(label="Work", street="", city="Capital City", state="IL", zip="62702", country="US")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture()
def loop():
    """Event loop for the synchronous BDD steps that drive async code."""
    event_loop = asyncio.new_event_loop()
    yield event_loop
    event_loop.close()


@pytest.fixture(autouse=True)
def run_around_tests():
    """Reset process-wide singletons after every test."""
    yield
    reset_registry()
    reset_store()


@pytest.fixture()
def buyer():
    return Session(user_id="u-001", billing_addresses=(BILLING,), shipping_addresses=(HOME, WORK))


@pytest.fixture()
def store():
    fake = FakeStore(catalogue={"b2": {"name": "Emma", "type": "book", "price": 8.0, "imageUrl": None}})
    fake.seed_cart("u-001", [BOOK, LAMP])
    set_store(fake)
    return fake
