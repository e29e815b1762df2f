import pytest
from fastapi.testclient import TestClient

from main import create_app
from store import OrderStore


@pytest.fixture
def store() -> OrderStore:
    return OrderStore()


@pytest.fixture
def client(store: OrderStore) -> TestClient:
    return TestClient(create_app(store))
