"""Command modules for the RideFlow CLI."""

from rideflow.cli_module.commands.auth_commands import auth_group
from rideflow.cli_module.commands.ride_commands import ride_group
from rideflow.cli_module.commands.analytics_commands import analytics_command

__all__ = [
    'auth_group',
    'ride_group',
    'analytics_command',
]
