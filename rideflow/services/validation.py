"""Input validation shared by the RideFlow services."""

import re
from datetime import datetime
from typing import Any

from rideflow.timeutil import parse_datetime

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6


class ValidationError(Exception):
    """Custom exception for malformed or missing input."""
    pass


def normalize_email(email: Any) -> str:
    """
    Check the shape of an email address and return it lower-cased.

    Raises:
        ValidationError: If the address is not of the form local@domain.tld
    """
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("Please enter a valid email address.")
    return email.strip().lower()


def validate_name(name: Any) -> str:
    if not isinstance(name, str) or len(name.strip()) < MIN_NAME_LENGTH:
        raise ValidationError(f"Name must be at least {MIN_NAME_LENGTH} characters.")
    return name.strip()


def validate_password(password: Any) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return password


def validate_location(value: Any, label: str) -> str:
    """Require a non-blank location string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} location is required.")
    return value.strip()


def validate_passengers(value: Any) -> int:
    """
    Require a positive whole passenger count.

    Numeric strings are accepted, as form fields deliver them.
    """
    if isinstance(value, bool):
        raise ValidationError("Passengers must be a positive whole number.")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValidationError("Passengers must be a positive whole number.")
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise ValidationError("Passengers must be a positive whole number.")
    return value


def validate_date_time(value: Any) -> datetime:
    """Parse a scheduled ride time."""
    try:
        return parse_datetime(value)
    except ValueError:
        raise ValidationError(f"Invalid date and time: {value!r}. Use YYYY-MM-DDTHH:MM.")
