"""
``flask cafe`` commands, meant to be run by cron:

    30 17 * * 1-5  flask cafe remind
    0 18 * * 1-5   flask cafe close-voting
"""

from datetime import date

import click
from flask import current_app
from flask.cli import AppGroup

from cafe_app.scripts.create_admin import create_admin
from cafe_app.scripts.seed_roles import seed_roles
from cafe_app.services import scheduler_service
from cafe_app.services.clock import get_clock

cafe_cli = AppGroup("cafe", help="Cafe voting jobs.")


def _cycle_date(value):
    if value:
        return date.fromisoformat(value)
    clock = get_clock()
    return clock.tomorrow(clock.now())


@cafe_cli.command("remind")
@click.option("--date", "menu_date", default=None, help="Cycle date (YYYY-MM-DD), defaults to tomorrow.")
def remind_command(menu_date):
    """Remind users who have not voted yet."""
    sent = scheduler_service.send_voting_reminder(_cycle_date(menu_date))
    click.echo(f"Sent {sent} reminder(s)")


@cafe_cli.command("close-voting")
@click.option("--date", "menu_date", default=None, help="Cycle date (YYYY-MM-DD), defaults to tomorrow.")
def close_voting_command(menu_date):
    """Close voting and finalize the winner, or flag a tie."""
    outcome = scheduler_service.close_voting(_cycle_date(menu_date))
    click.echo(f"Close voting: {outcome['status']}")


@cafe_cli.command("seed-roles")
def seed_roles_command():
    """Create the ADMIN, CAFE and USER roles."""
    added = seed_roles()
    click.echo(f"Role seeding complete ({added} added)")


@cafe_cli.command("create-admin")
@click.option("--email", default=None, help="Defaults to ADMIN_EMAIL.")
@click.option("--password", default=None, help="Defaults to ADMIN_PASSWORD.")
def create_admin_command(email, password):
    """Create the first ADMIN account."""
    email = email or current_app.config.get("ADMIN_EMAIL")
    password = password or current_app.config.get("ADMIN_PASSWORD")
    if not email or not password:
        raise click.UsageError("Pass --email/--password or set ADMIN_EMAIL and ADMIN_PASSWORD")
    created = create_admin(email, password)
    click.echo("Created admin user" if created else "Admin user already exists")
