"""Pytest configuration.

The environment is prepared before any application module is imported, and
every test gets its own in-memory database bound to the shared connection.
"""

import asyncio
import os

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "food_delivery_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from db.db_operation import mongo_conn
from main import app
from settings.config import settings
from utils.hash import hash_password
from utils.jwt_handler import issue_token

DEFAULT_PASSWORD = "Secur3!pass"


def run(coro):
    """Run a coroutine against the mock database from synchronous test code."""
    return asyncio.run(coro)


class Factory:
    """Inserts documents straight into the database."""

    def __init__(self, conn):
        self.conn = conn
        self._seq = 0

    def _next(self):
        self._seq += 1
        return self._seq

    def user(self, role="customer", email_id=None, password=DEFAULT_PASSWORD, status="active", **extra):
        n = self._next()
        now = datetime.utcnow()
        doc = {
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
            "email_id": email_id or f"user{n}@example.com",
            "password": hash_password(password),
            "role": role,
            "gender": None,
            "phone_number": None,
            "status": status,
            "last_active_at": None,
            "created_at": now,
            "updated_at": now,
        }
        doc.update(extra)
        doc["_id"] = run(self.conn.users_collection.insert_one(doc)).inserted_id
        return doc

    def restaurant(self, owner, **extra):
        n = self._next()
        now = datetime.utcnow()
        doc = {
            "owner": owner["_id"],
            "restaurant_name": f"Restaurant {n}",
            "address": "1 Main Street",
            "cuisine_type": "Italian",
            "opening_hours": "09:00-22:00",
            "delivery_zone": "Zone A",
            "created_at": now,
            "updated_at": now,
        }
        doc.update(extra)
        doc["_id"] = run(self.conn.restaurants_collection.insert_one(doc)).inserted_id
        return doc

    def menu_item(self, restaurant, **extra):
        n = self._next()
        now = datetime.utcnow()
        doc = {
            "restaurant": restaurant["_id"],
            "item_name": f"Item {n}",
            "description": None,
            "price": 9.5,
            "availability": True,
            "created_at": now,
            "updated_at": now,
        }
        doc.update(extra)
        doc["_id"] = run(self.conn.menu_items.insert_one(doc)).inserted_id
        return doc

    def order(self, user, restaurant, order_status="preparing", **extra):
        doc = {
            "user_id": user["_id"],
            "restaurant_id": restaurant["_id"],
            "items": [{"item_id": str(ObjectId()), "quantity": 1}],
            "delivery_address_id": None,
            "delivery_person_id": None,
            "order_status": order_status,
            "date": None,
            "created_at": datetime.utcnow(),
            "updated_at": None,
        }
        doc.update(extra)
        doc["_id"] = run(self.conn.orders_collection.insert_one(doc)).inserted_id
        return doc

    def address(self, user, is_default=False, **extra):
        doc = {
            "user_id": user["_id"],
            "first_name": "Ada",
            "last_name": "Lovelace",
            "address_line1": "12 Analytical Row",
            "city": "London",
            "state": "London",
            "country": "UK",
            "postal_code": "N1 9GU",
            "is_default": is_default,
            "created_at": datetime.utcnow(),
        }
        doc.update(extra)
        doc["_id"] = run(self.conn.delivery_addresses.insert_one(doc)).inserted_id
        return doc


@pytest.fixture(autouse=True)
def db():
    """Fresh in-memory database for every test."""
    client = AsyncMongoMockClient()
    mongo_conn.bind(client, client[settings.DB_NAME])
    yield mongo_conn


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def client():
    """Anonymous client; lifespan is not started so no real database is contacted."""
    return TestClient(app)


@pytest.fixture
def client_for():
    """Build a client already holding a valid token cookie for `user`."""
    def _make(user):
        c = TestClient(app)
        token = issue_token(str(user["_id"]), user["role"], settings.LOGIN_TOKEN_EXPIRE_HOURS)
        c.cookies.set(settings.TOKEN_COOKIE_NAME, token)
        return c
    return _make


@pytest.fixture
def admin(factory):
    return factory.user(role="admin", email_id="admin@example.com")


@pytest.fixture
def admin_client(client_for, admin):
    return client_for(admin)


@pytest.fixture
def customer(factory):
    return factory.user(role="customer", email_id="customer@example.com")


@pytest.fixture
def customer_client(client_for, customer):
    return client_for(customer)


@pytest.fixture
def owner(factory):
    return factory.user(role="restaurant", email_id="owner@example.com")


@pytest.fixture
def owner_client(client_for, owner):
    return client_for(owner)


@pytest.fixture
def restaurant(factory, owner):
    return factory.restaurant(owner)
