"""Key-value stores holding the RideFlow collections."""

import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

USERS_KEY = "users"
RIDES_KEY = "rides"
CURRENT_USER_KEY = "currentUser"

# Default value of every known key
DEFAULTS = {
    USERS_KEY: [],
    RIDES_KEY: [],
    CURRENT_USER_KEY: None,
}


class StorageError(Exception):
    """Custom exception for persistent store failures."""
    pass


def _default_for(key: str) -> Any:
    default = DEFAULTS.get(key)
    return list(default) if isinstance(default, list) else default


def _serialize(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Could not serialize value for '{key}': {str(e)}")


class MemoryStore:
    """
    In-process store.

    Values are kept as JSON text so reads hand out fresh copies, the same as
    the file-backed store.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}

    def initialize(self) -> None:
        """Create missing keys with their default values."""
        for key in DEFAULTS:
            if key not in self._data:
                self.set(key, _default_for(key))

    def get(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return _default_for(key)
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = _serialize(key, value)


class JsonFileStore:
    """
    Store backed by a single JSON document on disk.

    Every write serializes the full new document before atomically replacing
    the file, so a failed write leaves the previous contents in place.
    """

    def __init__(self, path: str):
        self.path = path

    def initialize(self) -> None:
        """
        Create the data file and any missing keys.

        A data file that exists but cannot be read is left untouched.
        """
        document = self._read_document()
        if document is None:
            logger.warning(f"Not initializing unreadable data file {self.path}")
            return
        missing = [key for key in DEFAULTS if key not in document]
        if missing or not os.path.exists(self.path):
            for key in missing:
                document[key] = _default_for(key)
            self._write_document(document)

    def get(self, key: str) -> Any:
        """
        Get the value stored under a key.

        Read failures are logged and degrade to the key's default value.
        """
        document = self._read_document()
        if document is None or key not in document:
            return _default_for(key)
        return document[key]

    def set(self, key: str, value: Any) -> None:
        """
        Replace the value stored under a key.

        Raises:
            StorageError: If the value cannot be serialized or written, or the
                existing data file cannot be read
        """
        document = self._read_document()
        if document is None:
            raise StorageError(f"Data file {self.path} is unreadable, refusing to overwrite it")
        document[key] = value
        self._write_document(document)

    def _read_document(self) -> Optional[Dict[str, Any]]:
        # None means the file exists but does not hold a readable document
        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, 'r') as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read data file {self.path}: {str(e)}")
            return None

        if not isinstance(document, dict):
            logger.warning(f"Data file {self.path} does not hold an object, ignoring it")
            return None
        return document

    def _write_document(self, document: Dict[str, Any]) -> None:
        payload = _serialize("document", document)
        directory = os.path.dirname(os.path.abspath(self.path))

        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".rideflow-", suffix=".tmp")
            try:
                with os.fdopen(fd, 'w') as f:
                    f.write(payload)
                os.replace(tmp_path, self.path)
            except OSError:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            logger.error(f"Failed to write data file {self.path}: {str(e)}")
            raise StorageError(f"Failed to save data: {str(e)}")
