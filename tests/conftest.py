"""
Shared test setup: in-memory database, API client and account helpers
"""

import itertools
import os

# Configure the app before it is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ.pop("OPENAI_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mealwell.database import Base, get_db
from mealwell.services.payment_service import get_razorpay_client
from main import app

# Test database setup
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


class FakeRazorpayOrders:
    """Stands in for razorpay.Client().order"""

    def __init__(self):
        self.created = []
        self.fetched = []
        self.fail = False
        self._orders = {}
        self._ids = itertools.count(1)

    def create(self, data):
        if self.fail:
            raise RuntimeError("provider unavailable")
        self.created.append(data)
        provider_order = {
            "id": f"order_rzp{next(self._ids):05d}",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }
        self._orders[provider_order["id"]] = provider_order
        return provider_order

    def fetch(self, order_id):
        if self.fail:
            raise RuntimeError("provider unavailable")
        self.fetched.append(order_id)
        return self._orders[order_id]

class FakeRazorpayClient:
    def __init__(self):
        self.order = FakeRazorpayOrders()


app.dependency_overrides[get_db] = override_get_db

client = TestClient(app)

_emails = itertools.count(1)


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def razorpay_client():
    fake = FakeRazorpayClient()
    app.dependency_overrides[get_razorpay_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_razorpay_client, None)


def register(role="customer", name="Test User"):
    """Sign up and log in a fresh account, returning its auth headers"""
    email = f"{role}{next(_emails)}@example.com"
    password = "MealWell123"
    response = client.post("/api/auth/signup", json={
        "name": name,
        "email": email,
        "password": password,
        "role": role,
    })
    assert response.status_code == 201, response.text

    login = client.post("/api/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


def create_chef(headers, display_name="Asha's Kitchen"):
    response = client.post("/api/chefs/", headers=headers, json={
        "display_name": display_name,
        "location": "Bengaluru",
        "cuisines": ["Indian"],
        "specialties": ["High Protein"],
        "price_per_meal": 300,
    })
    assert response.status_code == 201, response.text
    return response.json()


def order_payload(chef_id, **overrides):
    payload = {
        "chef_id": chef_id,
        "items": [
            {"meal_name": "Paneer Tikka Bowl", "meal_type": "lunch", "price": 250, "quantity": 1,
             "calories": 520, "protein": 32, "carbs": 40, "fats": 22},
            {"meal_name": "Masala Oats", "meal_type": "breakfast", "price": 150, "quantity": 3},
        ],
        "total_amount": 700.0,
        "discount": 50.0,
        "gst": 35.0,
        "delivery_address": {"street": "12 MG Road", "city": "Bengaluru", "zip_code": "560001"},
        "delivery_date": "2025-01-20",
        "delivery_slot": "12:00-14:00",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def customer_headers():
    return register("customer", "Ravi Kumar")


@pytest.fixture
def chef_headers():
    return register("chef", "Asha Rao")


@pytest.fixture
def chef(chef_headers):
    return create_chef(chef_headers)


@pytest.fixture
def order(customer_headers, chef):
    response = client.post("/api/orders/", headers=customer_headers, json=order_payload(chef["id"]))
    assert response.status_code == 201, response.text
    return response.json()
