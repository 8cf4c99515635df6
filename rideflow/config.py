"""Configuration for the RideFlow application."""

import os
import logging

from dotenv import load_dotenv

load_dotenv()

# Location of the JSON document backing the persistent store
DATA_FILE = os.getenv(
    "RIDEFLOW_DATA_FILE",
    os.path.join(os.path.expanduser("~/.rideflow"), "db.json"))

ANALYTICS_WINDOW_DAYS = int(os.getenv("RIDEFLOW_ANALYTICS_WINDOW_DAYS", "30"))

# Insight thresholds
FREQUENT_RIDER_THRESHOLD = int(os.getenv("RIDEFLOW_FREQUENT_RIDER_THRESHOLD", "5"))
PREMIUM_AVG_COST_THRESHOLD = float(os.getenv("RIDEFLOW_PREMIUM_AVG_COST_THRESHOLD", "25"))

# Simulated network latency around ride booking, in seconds
BOOKING_DELAY_SECONDS = float(os.getenv("RIDEFLOW_BOOKING_DELAY_SECONDS", "0"))

LOG_LEVEL = os.getenv("RIDEFLOW_LOG_LEVEL", "INFO")


def configure_logging(level: str = None) -> None:
    """Set up root logging for the application."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
