"""Ride commands for the RideFlow CLI."""

import time
from datetime import datetime, timedelta

import click
from tabulate import tabulate

from rideflow import config
from rideflow.cli_module.utils import USER_ERRORS, get_app, require_login, format_date_time
from rideflow.models.ride import RideStatus, RideType
from rideflow.services.ride_service import RideFilters, SORT_OPTIONS

RIDE_TYPES = [t.value for t in RideType]


def _default_date_time() -> str:
    """One hour from now, in datetime-local form."""
    return (datetime.now() + timedelta(hours=1)).strftime('%Y-%m-%dT%H:%M')


def _echo_ride(ride):
    click.echo(f"\n{ride.type.value.capitalize()} Ride (ID: {ride.id})\n")
    click.echo(f"Status: {ride.status.value}")
    click.echo(f"Route: {ride.pickup} -> {ride.dropoff}")
    click.echo(f"Date & Time: {format_date_time(ride.date_time)}")
    click.echo(f"Driver: {ride.driver.name} ({ride.driver.rating})")
    click.echo(f"Vehicle: {ride.vehicle.model} - {ride.vehicle.plate}")
    click.echo(f"Passengers: {ride.passengers}")
    click.echo(f"Price: ${ride.price}")


@click.group(name="ride")
def ride_group():
    """Ride management commands."""
    pass


@ride_group.command(name="book")
@click.option("--pickup", prompt="Pickup location", help="Pickup location")
@click.option("--dropoff", prompt="Dropoff location", help="Dropoff location")
@click.option("--date-time", default=_default_date_time, show_default="in one hour",
              help="Scheduled time, YYYY-MM-DDTHH:MM")
@click.option("--passengers", default=1, type=int, help="Number of passengers")
@click.option("--type", "ride_type", type=click.Choice(RIDE_TYPES), default="comfort",
              help="Ride type")
@require_login
def book_ride(pickup, dropoff, date_time, passengers, ride_type):
    """Book a new ride."""
    try:
        app = get_app()
        user = app.auth.require_session()
        ride = app.rides.create_ride(user.id, pickup, dropoff, date_time, passengers, ride_type)

        click.echo("Ride booked successfully!")
        _echo_ride(ride)

        if config.BOOKING_DELAY_SECONDS > 0:
            time.sleep(config.BOOKING_DELAY_SECONDS)
        click.echo("\nDriver is on the way")
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="list")
@click.option("--search", default="", help="Match pickup, dropoff, driver, status or type")
@click.option("--status", type=click.Choice(["all"] + [s.value for s in RideStatus]),
              default="all", help="Filter by ride status")
@click.option("--type", "ride_type", type=click.Choice(["all"] + RIDE_TYPES),
              default="all", help="Filter by ride type")
@click.option("--sort-by", type=click.Choice(list(SORT_OPTIONS)), default="dateDesc",
              help="Sort order")
@require_login
def list_rides(search, status, ride_type, sort_by):
    """View your ride history."""
    try:
        app = get_app()
        user = app.auth.require_session()
        rides = app.rides.filter_and_sort(
            user.id, RideFilters(search=search, status=status, type=ride_type, sort_by=sort_by))

        if not rides:
            click.echo("No rides found. Book your first ride with 'rideflow ride book'.")
            return

        table_data = [
            [
                ride.id,
                ride.type.value,
                ride.status.value,
                format_date_time(ride.date_time),
                f"{ride.pickup} -> {ride.dropoff}",
                ride.driver.name,
                f"${ride.price}",
            ]
            for ride in rides
        ]

        click.echo(tabulate(
            table_data,
            headers=["Ride ID", "Type", "Status", "Scheduled", "Route", "Driver", "Price"],
            tablefmt="pretty"
        ))
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="show")
@click.argument("ride_id")
@require_login
def show_ride(ride_id):
    """Show the details of a ride."""
    try:
        ride = get_app().rides.get_ride_by_id(ride_id)
        _echo_ride(ride)

        if ride.status is RideStatus.UPCOMING:
            click.echo("\nAvailable Actions:")
            click.echo(f"   - Edit with 'rideflow ride edit {ride.id}'")
            click.echo(f"   - Complete with 'rideflow ride complete {ride.id}'")
            click.echo(f"   - Cancel with 'rideflow ride cancel {ride.id}'")
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="edit")
@click.argument("ride_id")
@click.option("--pickup", help="New pickup location")
@click.option("--dropoff", help="New dropoff location")
@click.option("--date-time", help="New scheduled time, YYYY-MM-DDTHH:MM")
@click.option("--passengers", type=int, help="New number of passengers")
@click.option("--type", "ride_type", type=click.Choice(RIDE_TYPES), help="New ride type")
@require_login
def edit_ride(ride_id, pickup, dropoff, date_time, passengers, ride_type):
    """Edit an upcoming ride. The price is recalculated."""
    fields = {
        "pickup": pickup,
        "dropoff": dropoff,
        "dateTime": date_time,
        "passengers": passengers,
        "type": ride_type,
    }
    fields = {key: value for key, value in fields.items() if value is not None}

    if not fields:
        click.echo("No changes provided. Use the options to specify what to update.")
        click.echo("Example: rideflow ride edit <ride_id> --type premium")
        return

    try:
        ride = get_app().rides.update_ride(ride_id, fields)
        click.echo("Ride updated successfully!")
        _echo_ride(ride)
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="complete")
@click.argument("ride_id")
@require_login
def complete_ride(ride_id):
    """Mark an upcoming ride as completed."""
    try:
        ride = get_app().rides.complete_ride(ride_id)
        click.echo("Ride completed!")
        click.echo(f"Ride ID: {ride.id}")
        click.echo(f"Status: {ride.status.value}")
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="cancel")
@click.argument("ride_id")
@click.option("--confirm", is_flag=True, help="Confirm cancellation without prompting")
@require_login
def cancel_ride(ride_id, confirm):
    """Cancel an upcoming ride."""
    if not confirm and not click.confirm("Are you sure you want to cancel this ride?"):
        click.echo("Ride cancellation cancelled.")
        return

    try:
        ride = get_app().rides.cancel_ride(ride_id)
        click.echo("Ride cancelled")
        click.echo(f"Ride ID: {ride.id}")
        click.echo(f"Status: {ride.status.value}")
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="delete")
@click.argument("ride_id")
@click.option("--confirm", is_flag=True, help="Confirm deletion without prompting")
@require_login
def delete_ride(ride_id, confirm):
    """Permanently delete a ride."""
    if not confirm and not click.confirm("Are you sure you want to delete this ride?"):
        click.echo("Ride deletion cancelled.")
        return

    try:
        ride = get_app().rides.delete_ride(ride_id)
        click.echo(f"Ride {ride.id} deleted")
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)
