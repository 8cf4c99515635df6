"""Authentication service for RideFlow application."""

import logging
from typing import Optional

from rideflow.models.user import User
from rideflow.services.events import EventBus, SESSION_CHANGED
from rideflow.services.validation import (
    normalize_email,
    validate_name,
    validate_password,
)
from rideflow.storage import USERS_KEY, CURRENT_USER_KEY

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Custom exception for authentication errors."""
    pass


class DuplicateEmailError(AuthError):
    """Raised when signing up with an email that is already registered."""
    pass


class InvalidCredentialsError(AuthError):
    """Raised when no user matches the given email and password."""
    pass


class UnauthenticatedError(AuthError):
    """Raised when an operation needs a logged-in user."""
    pass


class AuthService:
    """Service for handling signup, login and the current session."""

    def __init__(self, store, events: Optional[EventBus] = None):
        """
        Args:
            store: Persistent key-value store holding users and the session
            events: Optional bus notified when the session changes
        """
        self.store = store
        self.events = events or EventBus()

    def signup(self, name: str, email: str, password: str) -> User:
        """
        Register a new user and log them in.

        Args:
            name: Display name (at least 2 characters)
            email: Email address, unique regardless of case
            password: Password (at least 6 characters)

        Returns:
            User: The created user

        Raises:
            ValidationError: If any field is malformed
            DuplicateEmailError: If the email is already registered
            StorageError: If the user could not be saved
        """
        name = validate_name(name)
        email = normalize_email(email)
        password = validate_password(password)

        users = self.store.get(USERS_KEY) or []
        if any(u.get("email", "").lower() == email for u in users):
            logger.warning(f"Signup rejected, email already registered: {email}")
            raise DuplicateEmailError(f"User with email {email} already exists")

        user = User(name=name, email=email, password=password)
        users.append(user.to_dict())
        self.store.set(USERS_KEY, users)
        logger.info(f"Created new user: {email}")

        self._set_session(user)
        return user

    def login(self, email: str, password: str) -> User:
        """
        Log in with email and password.

        Returns:
            User: The matching user, now the current session

        Raises:
            ValidationError: If the email is malformed
            InvalidCredentialsError: If no user matches both fields
        """
        email = normalize_email(email)

        for record in self.store.get(USERS_KEY) or []:
            if record.get("email", "").lower() == email and record.get("password") == password:
                user = User.from_dict(record)
                self._set_session(user)
                logger.info(f"User logged in: {email}")
                return user

        logger.warning(f"Failed login attempt for {email}")
        raise InvalidCredentialsError("Invalid credentials")

    def logout(self) -> None:
        """Clear the current session. Users and rides are left untouched."""
        self._set_session(None)

    def current_user(self) -> Optional[User]:
        """Get the logged-in user, if any."""
        record = self.store.get(CURRENT_USER_KEY)
        if not record:
            return None
        try:
            return User.from_dict(record)
        except (KeyError, TypeError) as e:
            logger.warning(f"Ignoring malformed session record: {str(e)}")
            return None

    def require_session(self) -> User:
        """
        Get the logged-in user or fail.

        Raises:
            UnauthenticatedError: If nobody is logged in
        """
        user = self.current_user()
        if user is None:
            raise UnauthenticatedError("Please login to continue")
        return user

    def _set_session(self, user: Optional[User]) -> None:
        self.store.set(CURRENT_USER_KEY, user.to_dict() if user else None)
        self.events.publish(SESSION_CHANGED, user=user)
