import mongomock
import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import app


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient()["stylehub_test"]


@pytest.fixture
def client(mongo_db):
    app.dependency_overrides[get_db] = lambda: mongo_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def offline_client():
    """Client for an app running with no database configured."""
    app.dependency_overrides[get_db] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def product_payload():
    return {
        "name": "Linen Shirt",
        "description": "Lightweight linen shirt for warm days.",
        "price": 45.0,
        "image": "https://images.example.com/linen-shirt.jpg",
        "category": "Men's Fashion",
    }


@pytest.fixture
def order_payload():
    return {
        "customerInfo": {
            "name": "Jane Doe",
            "email": "jane.doe@stylehub.io",
            "address": "12 Market Street",
            "phone": "+1 555 0100",
            "city": "Portland",
            "country": "US",
            "zipCode": "97201",
        },
        "products": [
            {"productId": "1", "name": "Men's Premium Blazer", "price": 89.99, "size": "M", "color": "Navy", "quantity": 1},
        ],
        "totalAmount": 99.99,
        "shippingCost": 10.0,
    }
