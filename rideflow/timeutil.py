"""Timestamp helpers shared by the models and services."""

from datetime import datetime, timezone

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with a 'Z' suffix."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Naive values (such as the 'YYYY-MM-DDTHH:MM' text of a datetime-local
    field) are taken as local time.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO-8601 string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def month_label(moment: datetime) -> str:
    """Short month name of a datetime, in local time."""
    return MONTH_LABELS[moment.astimezone().month - 1]
