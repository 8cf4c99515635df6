"""Entity models for the RideFlow application."""
from rideflow.models.user import User
from rideflow.models.ride import Ride, RideStatus, RideType, Driver, Vehicle


__all__ = [
    'User',
    'Ride',
    'RideStatus',
    'RideType',
    'Driver',
    'Vehicle',
]
