"""Tests for the persistent key-value stores."""

import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from rideflow.models.ride import Ride
from rideflow.storage import JsonFileStore, MemoryStore, StorageError


SAMPLE_RIDES = [
    {
        "id": "1718000000000",
        "userId": "user-1",
        "pickup": "Airport",
        "dropoff": "Downtown",
        "dateTime": "2025-06-20T09:00",
        "passengers": 2,
        "type": "economy",
        "status": "upcoming",
        "price": 13,
        "driver": {"name": "Sarah Johnson", "rating": "4.7"},
        "createdAt": "2025-06-10T08:00:00.000Z",
        "vehicle": {"model": "Honda Civic", "plate": "QK482"},
    },
    {
        "id": "1718000000001",
        "userId": "user-2",
        "pickup": "Main St",
        "dropoff": "Harbor",
        "dateTime": "2025-07-01T18:30",
        "passengers": 4,
        "type": "xl",
        "status": "completed",
        "price": 29,
        "driver": {"name": "David Wilson", "rating": 5.0},
        "createdAt": "2025-06-11T10:15:30.250Z",
        "vehicle": {"model": "Honda Odyssey", "plate": "ZZ001"},
    },
]


class TestJsonFileStore(unittest.TestCase):
    """Test cases for the file-backed store."""

    def setUp(self):
        """Create a scratch directory for the data file."""
        self.tmp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.tmp_dir, "data", "db.json")
        self.store = JsonFileStore(self.path)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_initialize_creates_default_keys(self):
        """Test that initialization writes all three collections."""
        self.store.initialize()

        with open(self.path) as f:
            document = json.load(f)

        self.assertEqual(document, {"users": [], "rides": [], "currentUser": None})

    def test_initialize_keeps_existing_data(self):
        """Test that initialization does not wipe stored rides."""
        self.store.initialize()
        self.store.set("rides", SAMPLE_RIDES)

        JsonFileStore(self.path).initialize()

        self.assertEqual(self.store.get("rides"), SAMPLE_RIDES)

    def test_get_missing_file_returns_defaults(self):
        """Test reads before any write."""
        self.assertEqual(self.store.get("rides"), [])
        self.assertEqual(self.store.get("users"), [])
        self.assertIsNone(self.store.get("currentUser"))

    def test_rides_round_trip_unchanged(self):
        """Test that rides persisted and reloaded are identical records."""
        self.store.set("rides", SAMPLE_RIDES)

        reloaded = JsonFileStore(self.path).get("rides")

        self.assertEqual(reloaded, SAMPLE_RIDES)
        self.assertEqual([Ride.from_dict(r).to_dict() for r in reloaded], SAMPLE_RIDES)

    def test_corrupt_file_reads_as_empty(self):
        """Test that a damaged data file degrades to empty collections."""
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, 'w') as f:
            f.write("{not json")

        with self.assertLogs("rideflow.storage.json_store", level="WARNING"):
            self.assertEqual(self.store.get("rides"), [])

    def test_initialize_leaves_corrupt_file_untouched(self):
        """Test that a damaged data file is not replaced by empty defaults."""
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        content = json.dumps({"users": [], "rides": SAMPLE_RIDES})[:-20]
        with open(self.path, 'w') as f:
            f.write(content)

        with self.assertLogs("rideflow.storage.json_store", level="WARNING"):
            self.store.initialize()

        with open(self.path) as f:
            self.assertEqual(f.read(), content)

    def test_set_refuses_to_overwrite_corrupt_file(self):
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, 'w') as f:
            f.write("{not json")

        with self.assertRaises(StorageError):
            self.store.set("currentUser", None)

        with open(self.path) as f:
            self.assertEqual(f.read(), "{not json")

    def test_failed_write_keeps_previous_contents(self):
        """Test that a write error raises StorageError and leaves the old data."""
        self.store.set("rides", SAMPLE_RIDES)

        with patch("rideflow.storage.json_store.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(StorageError) as ctx:
                self.store.set("rides", [])

        self.assertIn("disk full", str(ctx.exception))
        self.assertEqual(self.store.get("rides"), SAMPLE_RIDES)
        leftovers = [n for n in os.listdir(os.path.dirname(self.path)) if n.endswith(".tmp")]
        self.assertEqual(leftovers, [])

    def test_unserializable_value_is_rejected(self):
        """Test that values JSON cannot represent never reach the file."""
        self.store.set("rides", SAMPLE_RIDES)

        with self.assertRaises(StorageError):
            self.store.set("rides", [{"id": object()}])

        self.assertEqual(self.store.get("rides"), SAMPLE_RIDES)


class TestMemoryStore(unittest.TestCase):
    """Test cases for the in-memory store."""

    def test_reads_return_copies(self):
        """Test that mutating a read value does not change the store."""
        store = MemoryStore()
        store.initialize()
        store.set("rides", SAMPLE_RIDES)

        rides = store.get("rides")
        rides.pop()

        self.assertEqual(store.get("rides"), SAMPLE_RIDES)

    def test_unserializable_value_is_rejected(self):
        store = MemoryStore()
        store.set("users", [])

        with self.assertRaises(StorageError):
            store.set("users", [{"createdAt": object()}])

        self.assertEqual(store.get("users"), [])


if __name__ == '__main__':
    unittest.main()
