"""Ride entity for the RideFlow application."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union
from uuid import uuid4

from rideflow.timeutil import to_iso, utc_now


class RideStatus(Enum):
    """Possible statuses for a ride."""
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not RideStatus.UPCOMING


class RideType(Enum):
    """Ride classes, in the order used for tie-breaking."""
    ECONOMY = "economy"
    COMFORT = "comfort"
    PREMIUM = "premium"
    XL = "xl"


@dataclass
class Driver:
    """
    Synthesized driver details attached to a ride.

    Older records keep the rating as text such as "4.7"; it is stored back
    unchanged.
    """
    name: str
    rating: Union[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "rating": self.rating}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Driver":
        return cls(name=data["name"], rating=data["rating"])


@dataclass
class Vehicle:
    """Synthesized vehicle details attached to a ride."""
    model: str
    plate: str

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model, "plate": self.plate}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vehicle":
        return cls(model=data["model"], plate=data["plate"])


@dataclass
class Ride:
    """
    Represents a booked ride.

    Attributes:
        id: Unique identifier for the ride
        user_id: ID of the user who booked the ride
        pickup: Pickup location as entered
        dropoff: Dropoff location as entered
        date_time: Scheduled ride time (ISO-8601 text as entered)
        passengers: Number of passengers
        type: Ride class
        status: Current status of the ride
        price: Price drawn for the ride class
        driver: Assigned driver details
        vehicle: Assigned vehicle details
        created_at: When the booking was made (ISO-8601, UTC)
    """
    user_id: str
    pickup: str
    dropoff: str
    date_time: str
    passengers: int
    type: RideType
    price: int
    driver: Driver
    vehicle: Vehicle
    id: str = None
    status: RideStatus = RideStatus.UPCOMING
    created_at: str = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        """Initialize default values."""
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = to_iso(utc_now())

    def complete_ride(self) -> None:
        """Complete the ride."""
        self.status = RideStatus.COMPLETED

    def cancel_ride(self) -> None:
        """Cancel the ride."""
        self.status = RideStatus.CANCELLED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record layout."""
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "userId": self.user_id,
            "pickup": self.pickup,
            "dropoff": self.dropoff,
            "dateTime": self.date_time,
            "passengers": self.passengers,
            "type": self.type.value,
            "status": self.status.value,
            "price": self.price,
            "driver": self.driver.to_dict(),
            "createdAt": self.created_at,
            "vehicle": self.vehicle.to_dict(),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ride":
        """Build a ride from a persisted record, keeping unknown keys."""
        known = {"id", "userId", "pickup", "dropoff", "dateTime", "passengers", "type",
                 "status", "price", "driver", "vehicle", "createdAt"}
        return cls(
            id=data["id"],
            user_id=data["userId"],
            pickup=data["pickup"],
            dropoff=data["dropoff"],
            date_time=data["dateTime"],
            passengers=data["passengers"],
            type=RideType(data["type"]),
            status=RideStatus(data["status"]),
            price=data["price"],
            driver=Driver.from_dict(data["driver"]),
            vehicle=Vehicle.from_dict(data["vehicle"]),
            created_at=data.get("createdAt"),
            extra={k: v for k, v in data.items() if k not in known},
        )
