# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/trainhub/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to trainhub (PowerShell: $env:FLASK_APP="trainhub").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List accounts with inventory and recycling bin sizes.
# - python -m flask users create --name "Jane Doe" --email jane@example.com --password secret123
#   Create an account (prompts if options are omitted).
#
# Training maintenance:
# - python -m flask trainings list [--deleted]
#   List active trainings, or every training sitting in a recycling bin.
# - python -m flask trainings purge --email jane@example.com --yes
#   Permanently delete everything in one user's training recycling bin.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import User, Training
from .services import user_service, training_service
from .services.user_service import AccountExistsError
from .validation import ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


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
    db.session.remove()
    db.drop_all()
    click.echo("CREATE Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('users')
def users_group():
    """Account inspection and bootstrap."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all accounts."""
    users = db.session.query(User).order_by(User.email).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Name':<25} {'Email':<35} {'Items':<6} {'Bin'}")
    click.echo("="*80)

    for user in users:
        active = len(user.inventory_items())
        deleted = len(user.deleted_items())
        click.echo(f"{user.id:<5} {user.name:<25} {user.email:<35} {active:<6} {deleted}")

    click.echo("="*80 + "\n")


@users_group.command('create')
@click.option('--name', prompt=True, help='Full name')
@click.option('--email', prompt=True, help='Email (account key)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(name, email, password):
    """Create an account."""
    try:
        user = user_service.signup(name, email, password)
    except (ValidationError, AccountExistsError) as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created user: {user.name} ({user.email})")


@click.group('trainings')
def trainings_group():
    """Training inspection and recycling bin maintenance."""


@trainings_group.command('list')
@click.option('--deleted', is_flag=True, help='Show recycling bin contents instead')
@with_appcontext
def list_trainings(deleted):
    """List trainings."""
    query = db.session.query(Training)
    if deleted:
        query = query.filter(Training.deleted_at.isnot(None))
    else:
        query = query.filter(Training.deleted_at.is_(None))
    trainings = query.order_by(Training.created_at).all()

    if not trainings:
        click.echo("No trainings found.")
        return

    for t in trainings:
        click.echo(f"{t.id}  {t.title:<40} {t.created_by:<30} blocks={len(t.blocks or [])}")


@trainings_group.command('purge')
@click.option('--email', required=True, help='Owner whose recycling bin is emptied')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def purge_trainings(email, yes):
    """Permanently delete every training in a user's recycling bin."""
    if not yes:
        click.confirm(f"WARN Permanently delete all binned trainings for {email}?", abort=True)

    count = training_service.empty_bin(email)
    click.echo(f"PASS Purged {count} training(s) for {email}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(trainings_group)
