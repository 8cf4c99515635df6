"""Authentication commands for the RideFlow CLI."""

import click

from rideflow.cli_module.utils import USER_ERRORS, get_app, format_date_time


@click.group(name="auth")
def auth_group():
    """Authentication commands."""
    pass


@auth_group.command()
@click.option("--name", prompt=True, help="Your full name")
@click.option("--email", prompt=True, help="Your email address")
@click.option("--password", prompt=True, hide_input=True, help="Your password (6+ characters)")
def signup(name, email, password):
    """Create an account."""
    try:
        user = get_app().auth.signup(name, email, password)
        click.echo("Account created successfully!")
        click.echo(f"Email: {user.email}")
        click.echo("You are now logged in.")
    except USER_ERRORS as e:
        click.echo(f"Error during signup: {str(e)}", err=True)


@auth_group.command()
@click.option("--email", prompt=True, help="Your email address")
@click.option("--password", prompt=True, hide_input=True, help="Your password")
def signin(email, password):
    """Log in with credentials."""
    try:
        user = get_app().auth.login(email, password)
        click.echo(f"Welcome back, {user.name}!")
    except USER_ERRORS as e:
        click.echo(f"Error during signin: {str(e)}", err=True)


@auth_group.command()
def signout():
    """Log out from the application."""
    try:
        app = get_app()
        if app.auth.current_user() is None:
            click.echo("You were not signed in.")
            return
        app.auth.logout()
        click.echo("Logged out successfully")
    except USER_ERRORS as e:
        click.echo(f"Error during signout: {str(e)}", err=True)


@auth_group.command()
def whoami():
    """Show current user information."""
    try:
        user = get_app().auth.current_user()
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)
        return

    if user is None:
        click.echo("You are not signed in.", err=True)
        return

    click.echo(f"Signed in as: {user.name} [{user.initial}]")
    click.echo(f"Email: {user.email}")
    click.echo(f"Account created: {format_date_time(user.created_at)}")
