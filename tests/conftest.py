"""Shared fixtures for the RideFlow tests."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from rideflow.context import AppContext
from rideflow.storage import MemoryStore

# Fixed "now" used by every service in the tests
FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_NOW


def future_date_time(days: int = 2, hour: int = 9) -> str:
    """A datetime-local string safely after FIXED_NOW in any timezone."""
    moment = FIXED_NOW + timedelta(days=days)
    return moment.strftime(f"%Y-%m-%dT{hour:02d}:00")


@pytest.fixture
def store():
    """An initialized in-memory store."""
    memory_store = MemoryStore()
    memory_store.initialize()
    return memory_store


@pytest.fixture
def app(store):
    """Application context over the in-memory store with seeded randomness."""
    return AppContext(store=store, rng=random.Random(42), clock=fixed_clock)


@pytest.fixture
def alice(app):
    """A signed-up user who holds the session."""
    return app.auth.signup("Alice Rider", "a@x.com", "secret1")


def ride_record(user_id, ride_id, price=20, ride_type="comfort", status="upcoming",
                date_time="2025-06-20T09:00", created_at="2025-06-10T08:00:00.000Z",
                pickup="Airport", dropoff="Downtown", driver_name="John Smith"):
    """A persisted ride record with predictable values."""
    return {
        "id": ride_id,
        "userId": user_id,
        "pickup": pickup,
        "dropoff": dropoff,
        "dateTime": date_time,
        "passengers": 1,
        "type": ride_type,
        "status": status,
        "price": price,
        "driver": {"name": driver_name, "rating": 4.8},
        "createdAt": created_at,
        "vehicle": {"model": "Toyota Camry", "plate": "AB123"},
    }
