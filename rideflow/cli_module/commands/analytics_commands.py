"""Analytics commands for the RideFlow CLI."""

import click
from tabulate import tabulate

from rideflow.cli_module.utils import USER_ERRORS, get_app


@click.command(name="analytics")
@click.option("--days", type=click.IntRange(min=1), default=None,
              help="Only count rides booked in the last N days [default: 30]")
def analytics_command(days):
    """Show ride statistics, breakdowns and insights."""
    try:
        report = get_app().analytics.for_current_user(days)
    except USER_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)
        return

    click.echo(f"\nLast {report.window_days} days\n")
    click.echo(tabulate(
        [
            ["Total Rides", report.total_rides],
            ["Total Spent", f"${report.total_spent:.0f}"],
            ["Average Cost", f"${report.avg_cost:.0f}"],
            ["Completion Rate", f"{report.completion_rate:.0f}%"],
        ],
        tablefmt="pretty"
    ))

    if report.type_breakdown:
        click.echo("\nRide Types:")
        click.echo(tabulate(
            [[s.type.value.capitalize(), s.count, f"{s.percentage:.0f}%"] for s in report.type_breakdown],
            headers=["Type", "Rides", "Share"],
            tablefmt="pretty"
        ))

    if report.monthly_spending:
        click.echo("\nMonthly Spending:")
        click.echo(tabulate(
            [[month, f"${amount:.0f}"] for month, amount in report.monthly_spending.items()],
            headers=["Month", "Spent"],
            tablefmt="pretty"
        ))

    click.echo("\nInsights:")
    for insight in report.insights:
        click.echo(f"  * {insight.title}: {insight.description}")
