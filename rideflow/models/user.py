from dataclasses import dataclass
from typing import Any, Dict
from uuid import uuid4

from rideflow.timeutil import to_iso, utc_now


@dataclass
class User:
    """
    Represents a registered user of the ride-booking demo.

    Attributes:
        id: Unique identifier for the user
        name: Display name
        email: Email address, stored lower-cased and unique across users
        password: Password as entered (no hashing in this demo)
        created_at: When the account was created (ISO-8601, UTC)
    """
    name: str
    email: str
    password: str
    id: str = None
    created_at: str = None

    def __post_init__(self):
        """Initialize default values."""
        if self.id is None:
            self.id = str(uuid4())
        if self.created_at is None:
            self.created_at = to_iso(utc_now())

    @property
    def initial(self) -> str:
        """First letter of the name, used as an avatar."""
        return self.name[:1].upper()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record layout."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Build a user from a persisted record."""
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            password=data["password"],
            created_at=data.get("createdAt"),
        )
