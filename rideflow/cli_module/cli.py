"""Main CLI entry point for RideFlow application."""

import click

from rideflow import config

# Set context settings to properly display help for all commands
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
    "show_default": True
}

from rideflow.cli_module.commands.auth_commands import auth_group
from rideflow.cli_module.commands.ride_commands import ride_group
from rideflow.cli_module.commands.analytics_commands import analytics_command


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--log-level", default=None, help="Logging level [default: RIDEFLOW_LOG_LEVEL or INFO]")
def cli(log_level):
    """RideFlow CLI for booking rides and reviewing your ride history."""
    config.configure_logging(log_level)


# Register all command groups
cli.add_command(auth_group)
cli.add_command(ride_group)
cli.add_command(analytics_command)


def main():
    """Entry point for the application."""
    cli()


if __name__ == '__main__':
    main()
