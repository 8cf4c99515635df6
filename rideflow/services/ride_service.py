"""Ride service for RideFlow application."""

import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from rideflow.models.ride import Driver, Ride, RideStatus, RideType, Vehicle
from rideflow.services.auth_service import AuthService, UnauthenticatedError
from rideflow.services.events import (
    EventBus,
    RIDE_CANCELLED,
    RIDE_COMPLETED,
    RIDE_CREATED,
    RIDE_DELETED,
    RIDE_UPDATED,
)
from rideflow.services.validation import (
    ValidationError,
    validate_date_time,
    validate_location,
    validate_passengers,
)
from rideflow.storage import RIDES_KEY
from rideflow.timeutil import parse_datetime, to_iso, utc_now

logger = logging.getLogger(__name__)

DEFAULT_RIDE_TYPE = RideType.COMFORT

# Inclusive price range for each ride type
PRICE_RANGES = {
    RideType.ECONOMY: (12, 15),
    RideType.COMFORT: (18, 22),
    RideType.PREMIUM: (30, 38),
    RideType.XL: (25, 32),
}

DRIVER_NAMES = ["John Smith", "Sarah Johnson", "Michael Brown", "Emily Davis", "David Wilson"]
DRIVER_RATING_RANGE = (4.5, 5.0)

VEHICLE_MODELS = {
    RideType.ECONOMY: ["Toyota Corolla", "Honda Civic", "Hyundai Elantra"],
    RideType.COMFORT: ["Toyota Camry", "Honda Accord", "Mazda 6"],
    RideType.PREMIUM: ["Mercedes E-Class", "BMW 5 Series", "Audi A6"],
    RideType.XL: ["Toyota Sienna", "Honda Odyssey", "Chrysler Pacifica"],
}

SORT_OPTIONS = ("dateDesc", "dateAsc", "priceDesc", "priceAsc")

# Fields a caller may change through update_ride
EDITABLE_FIELDS = {
    "pickup": "pickup",
    "dropoff": "dropoff",
    "dateTime": "date_time",
    "date_time": "date_time",
    "passengers": "passengers",
    "type": "type",
}


class RideServiceError(Exception):
    """Custom exception for ride service errors."""
    pass


class RideNotFoundError(RideServiceError):
    """Raised when a ride id does not exist for the current user."""
    pass


class PastDateTimeError(RideServiceError):
    """Raised when booking a ride that is not scheduled in the future."""
    pass


class InvalidTransitionError(RideServiceError):
    """Raised when a ride is no longer upcoming."""
    pass


@dataclass
class RideFilters:
    """User-selected criteria for listing rides."""
    search: str = ""
    status: str = "all"
    type: str = "all"
    sort_by: str = "dateDesc"


def parse_ride_type(value: Any) -> RideType:
    """
    Resolve a ride type selection, falling back to comfort when unset.

    Raises:
        ValidationError: If the value is not a known ride type
    """
    if value is None or value == "":
        return DEFAULT_RIDE_TYPE
    if isinstance(value, RideType):
        return value
    try:
        return RideType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(t.value for t in RideType)
        raise ValidationError(f"Invalid ride type '{value}'. Choose one of: {allowed}.")


def calculate_price(ride_type: RideType, rng: random.Random) -> int:
    """Draw a price within the inclusive range of the ride type."""
    low, high = PRICE_RANGES[ride_type]
    return rng.randint(low, high)


def generate_driver_info(rng: random.Random) -> Driver:
    low, high = DRIVER_RATING_RANGE
    return Driver(name=rng.choice(DRIVER_NAMES), rating=round(rng.uniform(low, high), 1))


def generate_vehicle_info(ride_type: RideType, rng: random.Random) -> Vehicle:
    letters = "".join(rng.choice(string.ascii_uppercase) for _ in range(2))
    digits = "".join(rng.choice(string.digits) for _ in range(3))
    return Vehicle(model=rng.choice(VEHICLE_MODELS[ride_type]), plate=f"{letters}{digits}")


def _date_key(ride: Ride) -> datetime:
    try:
        return parse_datetime(ride.date_time)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)


class RideService:
    """Service for booking rides and querying ride history."""

    def __init__(self, store, auth: AuthService, events: Optional[EventBus] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime] = utc_now):
        """
        Args:
            store: Persistent key-value store holding the rides
            auth: Session service used to identify the caller
            events: Bus notified after every mutation
            rng: Randomness source for price, driver and vehicle synthesis
            clock: Returns the current time as an aware datetime
        """
        self.store = store
        self.auth = auth
        self.events = events or EventBus()
        self.rng = rng or random.Random()
        self.clock = clock

    def create_ride(self, owner_id: str, pickup: str, dropoff: str, date_time: str,
                    passengers: Any, ride_type: Any = None) -> Ride:
        """
        Book a new ride for the logged-in user.

        Args:
            owner_id: ID of the user booking the ride; must be the session user
            pickup: Pickup location
            dropoff: Dropoff location
            date_time: Scheduled time, ISO-8601 (e.g. 2025-06-01T14:30)
            passengers: Number of passengers
            ride_type: economy, comfort, premium or xl (comfort when unset)

        Returns:
            Ride: The booked ride

        Raises:
            UnauthenticatedError: If nobody is logged in or owner_id is not the session user
            ValidationError: If any field is malformed
            PastDateTimeError: If the scheduled time is not in the future
            StorageError: If the rides could not be saved
        """
        user = self.auth.require_session()
        if owner_id != user.id:
            raise UnauthenticatedError("Rides can only be booked for the logged-in user")

        pickup = validate_location(pickup, "Pickup")
        dropoff = validate_location(dropoff, "Dropoff")
        passengers = validate_passengers(passengers)
        ride_type = parse_ride_type(ride_type)
        scheduled = validate_date_time(date_time)

        if scheduled <= self.clock():
            raise PastDateTimeError("Ride date and time must be in the future.")

        ride = Ride(
            user_id=user.id,
            pickup=pickup,
            dropoff=dropoff,
            date_time=date_time.strip(),
            passengers=passengers,
            type=ride_type,
            price=calculate_price(ride_type, self.rng),
            driver=generate_driver_info(self.rng),
            vehicle=generate_vehicle_info(ride_type, self.rng),
            created_at=to_iso(self.clock()),
        )

        rides = self.store.get(RIDES_KEY) or []
        rides.append(ride.to_dict())
        self.store.set(RIDES_KEY, rides)

        logger.info(f"Booked {ride_type.value} ride {ride.id} for user {user.id}")
        self.events.publish(RIDE_CREATED, owner_id=user.id, ride=ride)
        return ride

    def get_ride_by_id(self, ride_id: str) -> Ride:
        """
        Get one of the logged-in user's rides.

        Raises:
            UnauthenticatedError: If nobody is logged in
            RideNotFoundError: If the ride does not exist or belongs to someone else
        """
        user = self.auth.require_session()
        _, ride = self._find_owned(self.store.get(RIDES_KEY) or [], ride_id, user.id)
        return ride

    def update_ride(self, ride_id: str, fields: Dict[str, Any]) -> Ride:
        """
        Edit an upcoming ride.

        Args:
            ride_id: ID of the ride to edit
            fields: Any of pickup, dropoff, dateTime, passengers, type

        Returns:
            Ride: The updated ride, priced again for its (possibly new) type

        Raises:
            RideNotFoundError: If the ride does not exist for the logged-in user
            InvalidTransitionError: If the ride is no longer upcoming
            ValidationError: If a field is unknown or malformed
        """
        user = self.auth.require_session()

        unknown = [key for key in fields if key not in EDITABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")
        if "dateTime" in fields and "date_time" in fields:
            raise ValidationError("Give the new date and time as either dateTime or date_time, not both.")

        rides = self.store.get(RIDES_KEY) or []
        index, ride = self._find_owned(rides, ride_id, user.id)

        if ride.status is not RideStatus.UPCOMING:
            raise InvalidTransitionError(f"Cannot edit a ride with status {ride.status.value}.")

        changes = {EDITABLE_FIELDS[key]: value for key, value in fields.items()}
        if "pickup" in changes:
            ride.pickup = validate_location(changes["pickup"], "Pickup")
        if "dropoff" in changes:
            ride.dropoff = validate_location(changes["dropoff"], "Dropoff")
        if "date_time" in changes:
            validate_date_time(changes["date_time"])
            ride.date_time = changes["date_time"].strip()
        if "passengers" in changes:
            ride.passengers = validate_passengers(changes["passengers"])
        if "type" in changes:
            ride.type = parse_ride_type(changes["type"])

        ride.price = calculate_price(ride.type, self.rng)

        rides[index] = ride.to_dict()
        self.store.set(RIDES_KEY, rides)

        logger.info(f"Updated ride {ride.id}")
        self.events.publish(RIDE_UPDATED, owner_id=user.id, ride=ride)
        return ride

    def complete_ride(self, ride_id: str) -> Ride:
        """Mark an upcoming ride as completed."""
        return self._transition(ride_id, RideStatus.COMPLETED, RIDE_COMPLETED)

    def cancel_ride(self, ride_id: str) -> Ride:
        """Mark an upcoming ride as cancelled."""
        return self._transition(ride_id, RideStatus.CANCELLED, RIDE_CANCELLED)

    def delete_ride(self, ride_id: str) -> Ride:
        """
        Permanently remove one of the logged-in user's rides, whatever its status.

        Returns:
            Ride: The removed ride

        Raises:
            RideNotFoundError: If the ride does not exist for the logged-in user
        """
        user = self.auth.require_session()
        rides = self.store.get(RIDES_KEY) or []
        index, ride = self._find_owned(rides, ride_id, user.id)

        del rides[index]
        self.store.set(RIDES_KEY, rides)

        logger.info(f"Deleted ride {ride.id}")
        self.events.publish(RIDE_DELETED, owner_id=user.id, ride=ride)
        return ride

    def get_user_rides(self, owner_id: str) -> List[Ride]:
        """All rides owned by a user, in stored order."""
        rides = []
        for record in self.store.get(RIDES_KEY) or []:
            if record.get("userId") != owner_id:
                continue
            try:
                rides.append(Ride.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed ride record {record.get('id')}: {str(e)}")
        return rides

    def filter_and_sort(self, owner_id: str, filters: Optional[RideFilters] = None) -> List[Ride]:
        """
        List a user's rides matching the filters, in the requested order.

        Only rides owned by owner_id are ever returned. The sort is stable, so
        rides with equal keys keep their stored order in either direction.

        Raises:
            ValidationError: If a filter or sort option is unknown
        """
        filters = filters or RideFilters()
        self._check_filters(filters)

        rides = self.get_user_rides(owner_id)

        if filters.search:
            search = filters.search.lower()
            rides = [
                r for r in rides
                if search in r.pickup.lower()
                or search in r.dropoff.lower()
                or search in r.driver.name.lower()
                or search in r.status.value
                or search in r.type.value
            ]

        if filters.status != "all":
            rides = [r for r in rides if r.status.value == filters.status]

        if filters.type != "all":
            rides = [r for r in rides if r.type.value == filters.type]

        if filters.sort_by == "dateDesc":
            rides.sort(key=_date_key, reverse=True)
        elif filters.sort_by == "dateAsc":
            rides.sort(key=_date_key)
        elif filters.sort_by == "priceDesc":
            rides.sort(key=lambda r: r.price, reverse=True)
        else:
            rides.sort(key=lambda r: r.price)

        return rides

    def _transition(self, ride_id: str, target: RideStatus, event: str) -> Ride:
        """
        Move an upcoming ride into a terminal status.

        Raises:
            RideNotFoundError: If the ride does not exist for the logged-in user
            InvalidTransitionError: If the ride already reached a terminal status
        """
        user = self.auth.require_session()
        rides = self.store.get(RIDES_KEY) or []
        index, ride = self._find_owned(rides, ride_id, user.id)

        if ride.status.is_terminal:
            logger.warning(f"Rejected {target.value} for ride {ride.id} in status {ride.status.value}")
            raise InvalidTransitionError(
                f"Cannot mark ride as {target.value}: it is already {ride.status.value}.")

        if target is RideStatus.COMPLETED:
            ride.complete_ride()
        else:
            ride.cancel_ride()

        rides[index] = ride.to_dict()
        self.store.set(RIDES_KEY, rides)

        logger.info(f"Ride {ride.id} is now {ride.status.value}")
        self.events.publish(event, owner_id=user.id, ride=ride)
        return ride

    @staticmethod
    def _find_owned(rides: List[Dict[str, Any]], ride_id: str, owner_id: str):
        for index, record in enumerate(rides):
            if str(record.get("id")) == str(ride_id) and record.get("userId") == owner_id:
                return index, Ride.from_dict(record)
        raise RideNotFoundError(f"Ride with ID {ride_id} not found")

    @staticmethod
    def _check_filters(filters: RideFilters) -> None:
        statuses = {"all"} | {s.value for s in RideStatus}
        types = {"all"} | {t.value for t in RideType}

        if filters.status not in statuses:
            raise ValidationError(f"Unknown status filter '{filters.status}'.")
        if filters.type not in types:
            raise ValidationError(f"Unknown type filter '{filters.type}'.")
        if filters.sort_by not in SORT_OPTIONS:
            raise ValidationError(
                f"Unknown sort option '{filters.sort_by}'. Choose one of: {', '.join(SORT_OPTIONS)}.")
