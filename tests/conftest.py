import os
import pathlib
import sys
from datetime import date, timedelta

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
os.environ.setdefault("APP_ENV", "test")

import pytest

from app import create_app
from app.config import TestConfig
from app.models.store import Store
from app.services.access_policy import AccessPolicy
from app.services.booking_service import BookingService

# Fixed "today" for every booking test: 2030-03-01
TODAY = date(2030, 3, 1)


def day(n: int) -> str:
    """ISO date n days after TODAY."""
    return (TODAY + timedelta(days=n)).isoformat()


@pytest.fixture
def store(tmp_path):
    """A fresh Store backed by a temporary pickle file."""
    return Store(tmp_path / "data.pkl")


@pytest.fixture
def policy():
    return AccessPolicy()


@pytest.fixture
def bookings(store, policy):
    return BookingService(store, policy, clock=lambda: TODAY)


@pytest.fixture
def make_vehicle(store):
    counter = {"n": 0}

    def _make(rate=5000.0, **extra):
        counter["n"] += 1
        rec = {
            "make": "Toyota",
            "model": "Corolla",
            "year": 2019,
            "licensePlate": f"KDA {counter['n']:03d}A",
            "dailyRate": rate,
        }
        rec.update(extra)
        return store.insert("vehicles", rec)

    return _make


@pytest.fixture
def make_client(store):
    counter = {"n": 0}

    def _make(**extra):
        counter["n"] += 1
        n = counter["n"]
        rec = {
            "fullName": f"Client {n}",
            "idOrPassport": f"ID{n:05d}",
            "phone": f"07000000{n:02d}",
            "licenseNumber": f"DL{n:05d}",
        }
        rec.update(extra)
        return store.insert("clients", rec)

    return _make


@pytest.fixture
def vehicle(make_vehicle):
    return make_vehicle()


@pytest.fixture
def hirer(make_client):
    return make_client()


@pytest.fixture
def app(store):
    return create_app(TestConfig, store=store, clock=lambda: TODAY)


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def login(app, client):
    """Create a user with the given role and log the test client in as them."""

    def _login(role="director"):
        email = f"{role}@test.local"
        users = app.extensions["carhire"].users
        if users.find_user(email) is None:
            users.create_user(email, "Secret123", role)
        r = client.post("/api/auth/login", json={"email": email, "password": "Secret123"})
        assert r.status_code == 200, r.get_json()
        return client

    return _login
