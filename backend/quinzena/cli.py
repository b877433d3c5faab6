# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/quinzena/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates all tables and the default admin (ADM / 123456).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role and active status.
# - python -m flask users create --username ana --name "Ana Silva" --password 123456 --role user
#   Create a user (prompts if options are omitted).
#
# Periods:
# - python -m flask periods list [--year 2025]
#   Print the fortnight catalog; "*" marks the current period.
#
# Entries maintenance:
# - python -m flask entries reapply-rates --user-id 2
#   Re-price all stored entries of a user with the current settings.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import User, ROLE_ADMIN, ROLE_USER
from .repositories import get_repository
from .services.auth_service import AuthError, create_user, ensure_default_admin
from .services.period_service import catalog_for_app, current_period_index
from .services.rate_service import reapply_rates
from .time_utils import today


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize Quinzena: schema and default administrator.

    SECURITY: The default admin must change its password on first login.
    """
    click.echo("START Initializing Quinzena...")

    db.create_all()
    click.echo("PASS Tables ready")

    admin = ensure_default_admin()
    click.echo(f"PASS Admin user: {admin.username} (ID: {admin.id})")

    repo = get_repository()
    click.echo(f"PASS Financial storage: {repo.name}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    # Storage choice may depend on which tables exist
    current_app.extensions.pop("financial_repository", None)

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--name', prompt=True, help='Display name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice([ROLE_ADMIN, ROLE_USER]), default=ROLE_USER, show_default=True)
@with_appcontext
def create_user_cli(username, name, password, role):
    """Create a new user; the password must be changed on first login."""
    try:
        user = create_user(username=username, password=password, name=name, role=role)
    except AuthError as e:
        click.echo(f"FAIL Failed to create user: {e}")
        return

    click.echo(f"PASS Created user: {user.username} (ID: {user.id}) with role '{user.role}'")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Username':<20} {'Name':<30} {'Role':<8} {'Active'}")
    click.echo("="*80)

    for user in users:
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.id:<5} {user.username:<20} {user.name:<30} {user.role:<8} {active_str}")

    click.echo("="*80 + "\n")


@click.group('periods')
def periods_group():
    """Fortnight catalog commands."""


@periods_group.command('list')
@click.option('--year', type=int, help='Only periods of this year')
@with_appcontext
def list_periods_cli(year):
    periods = catalog_for_app(current_app)
    current = periods[current_period_index(periods, today())]

    for period in periods:
        if year and not period.start_date.startswith(f"{year}-"):
            continue
        marker = "*" if period.id == current.id else " "
        click.echo(f"{marker} {period.id:<12} {period.start_date} .. {period.end_date}  {period.label}")


@click.group('entries')
def entries_group():
    """Time entry maintenance commands."""


@entries_group.command('reapply-rates')
@click.option('--user-id', type=int, required=True)
@with_appcontext
def reapply_rates_cli(user_id):
    """Re-price every stored entry of a user with the current settings."""
    repo = get_repository()
    settings = repo.get_settings(user_id)
    entries = repo.get_time_entries(user_id)

    if not entries:
        click.echo("No entries found.")
        return

    repriced = reapply_rates(entries, settings.hourly_rate, settings.overtime_rate, settings.daily_limit)
    repo.save_time_entries(repriced, user_id)
    click.echo(f"PASS Re-priced {len(repriced)} entries for user {user_id}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(periods_group)
    app.cli.add_command(entries_group)
