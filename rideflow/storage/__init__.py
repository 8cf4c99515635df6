"""Persistent key-value storage for the RideFlow application."""
from rideflow.storage.json_store import (
    JsonFileStore,
    MemoryStore,
    StorageError,
    USERS_KEY,
    RIDES_KEY,
    CURRENT_USER_KEY,
)


__all__ = [
    'JsonFileStore',
    'MemoryStore',
    'StorageError',
    'USERS_KEY',
    'RIDES_KEY',
    'CURRENT_USER_KEY',
]
