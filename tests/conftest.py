import asyncio
import itertools
import os
import tempfile

# The engine is built at import time, so the test database has to be chosen first
_DB_DIR = tempfile.mkdtemp(prefix="shop_service_tests_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SEED_DATA"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from shop_service.db.init_db import drop_db
from shop_service.main import app


@pytest.fixture
def client():
    asyncio.run(drop_db())
    # startup recreates the tables
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        payload = {
            "full_name": f"User {n}",
            "email": f"user{n}@example.com",
            "password": "secret123",
            **overrides,
        }
        response = client.post("/api/users", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_category(client):
    counter = itertools.count(1)

    def _make(name=None, description=None):
        payload = {"name": name or f"Category {next(counter)}", "description": description}
        response = client.post("/api/categories", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_product(client, make_category):
    counter = itertools.count(1)
    state = {}

    def _make(category_id=None, name=None, price="100.00", stock_quantity=10, **extra):
        if category_id is None:
            if "category_id" not in state:
                state["category_id"] = make_category()["id"]
            category_id = state["category_id"]
        payload = {
            "category_id": category_id,
            "name": name or f"Product {next(counter)}",
            "price": price,
            "stock_quantity": stock_quantity,
            **extra,
        }
        response = client.post("/api/products", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def add_to_cart(client):
    def _add(user_id, product_id, quantity=1):
        response = client.post(f"/api/users/{user_id}/cart", json={"product_id": product_id, "quantity": quantity})
        assert response.status_code == 201, response.text
        return response.json()

    return _add


@pytest.fixture
def checkout(client):
    def _checkout(user_id, payment_method="CASH_ON_DELIVERY", payment_gateway=None, expected_status=201):
        payload = {
            "user_id": user_id,
            "shipping_name": "John Doe",
            "shipping_address": "123 Main St",
            "shipping_phone": "0600000000",
            "shipping_email": "john@example.com",
            "payment_method": payment_method,
        }
        if payment_gateway is not None:
            payload["payment_gateway"] = payment_gateway
        response = client.post("/api/orders/checkout", json=payload)
        assert response.status_code == expected_status, response.text
        return response.json()

    return _checkout


@pytest.fixture
def stock_of(client):
    def _stock(product_id):
        response = client.get(f"/api/products/{product_id}")
        assert response.status_code == 200, response.text
        return response.json()["stock_quantity"]

    return _stock
