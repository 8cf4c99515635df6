"""Tests for ride status transitions in RideFlow."""

import pytest

from conftest import future_date_time, ride_record
from rideflow.models.ride import RideStatus
from rideflow.services.auth_service import UnauthenticatedError
from rideflow.services.events import RIDE_CANCELLED, RIDE_COMPLETED
from rideflow.services.ride_service import InvalidTransitionError, RideNotFoundError


@pytest.fixture
def ride(app, alice):
    return app.rides.create_ride(alice.id, "Airport", "Downtown", future_date_time(), 1, "economy")


def _stored_status(app, ride_id):
    return next(r["status"] for r in app.store.get("rides") if r["id"] == ride_id)


class TestRideStatus:
    """Test class for completing and cancelling rides."""

    def test_complete_ride(self, app, ride):
        completed = app.rides.complete_ride(ride.id)

        assert completed.status is RideStatus.COMPLETED
        assert completed.price == ride.price
        assert _stored_status(app, ride.id) == "completed"

    def test_cancel_ride(self, app, ride):
        cancelled = app.rides.cancel_ride(ride.id)

        assert cancelled.status is RideStatus.CANCELLED
        assert cancelled.price == ride.price
        assert _stored_status(app, ride.id) == "cancelled"

    def test_cancel_after_complete_keeps_completed(self, app, ride):
        """Test that no transition leaves a terminal status."""
        app.rides.complete_ride(ride.id)

        with pytest.raises(InvalidTransitionError) as excinfo:
            app.rides.cancel_ride(ride.id)

        assert "already completed" in str(excinfo.value)
        assert _stored_status(app, ride.id) == "completed"

    def test_complete_after_cancel_keeps_cancelled(self, app, ride):
        app.rides.cancel_ride(ride.id)

        with pytest.raises(InvalidTransitionError):
            app.rides.complete_ride(ride.id)

        assert _stored_status(app, ride.id) == "cancelled"

    def test_transition_unknown_ride(self, app, alice):
        with pytest.raises(RideNotFoundError) as excinfo:
            app.rides.complete_ride("missing-id")

        assert "Ride with ID" in str(excinfo.value)

    def test_transition_another_users_ride(self, app, alice):
        """Test that another user's ride is reported as not found and left alone."""
        app.store.set("rides", [ride_record("someone-else", "foreign")])

        with pytest.raises(RideNotFoundError):
            app.rides.cancel_ride("foreign")

        assert _stored_status(app, "foreign") == "upcoming"

    def test_transition_requires_session(self, app, ride):
        app.auth.logout()

        with pytest.raises(UnauthenticatedError):
            app.rides.complete_ride(ride.id)

    def test_transitions_notify_subscribers(self, app, alice):
        first = app.rides.create_ride(alice.id, "Airport", "Downtown", future_date_time(), 1)
        second = app.rides.create_ride(alice.id, "Harbor", "Museum", future_date_time(3), 1)
        received = []
        app.events.subscribe(RIDE_COMPLETED, lambda event, **payload: received.append((event, payload)))
        app.events.subscribe(RIDE_CANCELLED, lambda event, **payload: received.append((event, payload)))

        app.rides.complete_ride(first.id)
        app.rides.cancel_ride(second.id)

        assert [event for event, _ in received] == [RIDE_COMPLETED, RIDE_CANCELLED]
        assert received[0][1]["owner_id"] == alice.id
        assert received[1][1]["ride"].id == second.id

    def test_transition_keeps_stored_record_format(self, app, alice):
        """Test that a text driver rating from an older record is written back as text."""
        record = ride_record(alice.id, "legacy")
        record["driver"]["rating"] = "4.7"
        app.store.set("rides", [record])

        app.rides.complete_ride("legacy")

        stored = app.store.get("rides")[0]
        assert stored["driver"] == {"name": "John Smith", "rating": "4.7"}
        assert stored["status"] == "completed"
