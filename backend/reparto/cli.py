# Overview: Flask CLI command groups for bootstrap, seeding and user administration.

# backend/reparto/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the default admin user.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed
#   Populate the deterministic demo data set (one transaction, all or nothing).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with hierarchy and status.
# - python -m flask users create --username juan --name "Juan Lopez" --hierarchy 2 --password "secreto1"
#   Create a user (prompts if options are omitted).
# - python -m flask users set-password admin
#   Replace a user's password (prompted, min 6 characters).

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import User
from .services import auth_service, seed_service, user_service
from .validation import ServiceError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create all tables and the default admin (id=1, username admin)."""
    click.echo("BUILD  Creating tables...")
    db.create_all()

    admin = auth_service.ensure_default_admin()
    if admin:
        click.echo("PASS  Admin user created (username: admin).")
    else:
        click.echo("SKIP  Admin user already exists.")


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
    auth_service.ensure_default_admin()

    click.echo("PASS Database reset complete.")


@system_group.command('seed')
@with_appcontext
def seed():
    """Populate demo users, clients, products, sales and expenses."""
    try:
        counts = seed_service.populate_test_data()
    except ServiceError as exc:
        raise click.ClickException(str(exc))

    for name, count in counts.items():
        click.echo(f"{name:<16} {count}")
    click.echo(f"PASS  Seed users log in with password: {seed_service.SEED_PASSWORD}")


@click.group('users')
def users_group():
    """User inspection and bootstrap."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--name', prompt=True, help='Display name')
@click.option('--hierarchy', type=int, prompt=True, help='Role rank (1 = admin)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(username, name, hierarchy, password):
    """Create a user."""
    try:
        user = auth_service.register_user({
            "username": username,
            "name": name,
            "hierarchy": hierarchy,
            "password": password,
        })
    except ServiceError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"PASS  Created user {user.username} (id={user.id})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = db.session.query(User).order_by(User.id).all()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*72)
    click.echo(f"{'ID':<5} {'Username':<20} {'Name':<28} {'Rank':<6} {'Status'}")
    click.echo("="*72)
    for user in users:
        click.echo(f"{user.id:<5} {user.username:<20} {user.name:<28} {user.hierarchy:<6} {user.status}")
    click.echo("="*72 + "\n")


@users_group.command('set-password')
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='New password')
@with_appcontext
def set_password(username, password):
    """Replace a user's password."""
    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        raise click.ClickException(f"User {username} not found")
    try:
        user_service.update_user_password(user.id, password)
    except ServiceError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"PASS  Password updated for {username}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
