from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from boutique.core.store import RecordStore
from boutique.main import create_app
from boutique.models.product import ProductCategory
from boutique.schemas.product import ProductCreate
from boutique.services.product_service import create_product


@pytest.fixture
def store():
    store = RecordStore("sqlite://").connect()
    yield store
    store.disconnect()


@pytest.fixture
def client(store):
    app = create_app(store)
    with TestClient(app) as c:
        yield c


def add_product(store, name, quantity, cost_price, sell_price, category=ProductCategory.Bags):
    return create_product(store, ProductCreate(
        name=name,
        category=category,
        quantity=quantity,
        cost_price=Decimal(cost_price),
        sell_price=Decimal(sell_price),
    ))


@pytest.fixture
def tote_bag(store):
    return add_product(store, "Tote Bag", 10, "20000", "50000")
