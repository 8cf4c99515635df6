"""RideFlow: a local ride-booking demo with ride history and analytics."""

__version__ = "0.1.0"
