"""Utility functions for the CLI interface."""

from functools import wraps

import click

from rideflow.context import AppContext
from rideflow.services.auth_service import AuthError
from rideflow.services.ride_service import RideServiceError
from rideflow.services.validation import ValidationError
from rideflow.storage import StorageError
from rideflow.timeutil import parse_datetime

# Errors reported to the user instead of aborting a command
USER_ERRORS = (AuthError, RideServiceError, ValidationError, StorageError)


def get_app() -> AppContext:
    """Get the application context of the running command."""
    ctx = click.get_current_context()
    root = ctx.find_root()
    if root.obj is None:
        root.obj = AppContext()
    return root.obj


def require_login(f):
    """Decorator that stops a command when nobody is logged in."""
    @wraps(f)
    def wrapped(*args, **kwargs):
        try:
            get_app().auth.require_session()
        except AuthError as e:
            click.echo(f"{str(e)}. Use 'rideflow auth signin' to log in.", err=True)
            return
        except USER_ERRORS as e:
            click.echo(f"Error: {str(e)}", err=True)
            return
        return f(*args, **kwargs)
    return wrapped


def format_date_time(value: str, fmt: str = '%Y-%m-%d %H:%M') -> str:
    """Format an ISO timestamp for display, or return it unchanged."""
    try:
        return parse_datetime(value).strftime(fmt)
    except (ValueError, TypeError):
        return value
