# Overview: Flask CLI command groups for bootstrap, terminal tokens, and inspection.

# backend/salonsync/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--no-demo]
#   Create tables and seed demo staff and catalog if empty (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Terminal tokens:
# - python -m flask tokens issue
#   Print a fresh terminal code and its QR payload.
# - python -m flask tokens sweep
#   Delete expired terminal codes.
#
# Staff inspection:
# - python -m flask staff list
#   List staff with role and clock status.

import json

import click
from flask.cli import with_appcontext

from .extensions import db
from .services import seed_service, staff_service, token_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--no-demo', is_flag=True, help='Create tables only, skip demo data')
@with_appcontext
def init_system(no_demo):
    """
    Create the schema and seed demo data into empty tables.

    Demo PINs: Sarah Manager 1111, Mike Supervisor 2222, Jessica Stylist 3333,
    David Barber 4444, Lisa Tech 5555. Change them before going live.
    """
    click.echo("START Initializing SalonSync...")
    db.create_all()
    click.echo("PASS Tables ready")

    if no_demo:
        return

    created = seed_service.seed_demo_data()
    click.echo(f"PASS Seeded {created['staff']} staff, {created['products']} catalog items")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema with demo data.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD Creating tables...")
    db.create_all()
    created = seed_service.seed_demo_data()
    click.echo(f"PASS Database reset ({created['staff']} staff, {created['products']} catalog items)")


@click.group('tokens')
def tokens_group():
    """Terminal clock-in code commands."""


@tokens_group.command('issue')
@with_appcontext
def issue_token():
    """Issue a terminal code (same as the terminal display does)."""
    token = token_service.issue_token()
    click.echo(json.dumps(token_service.build_qr_payload(token), indent=2))


@tokens_group.command('sweep')
@with_appcontext
def sweep_tokens():
    """Delete expired terminal codes."""
    deleted = token_service.sweep_expired_tokens()
    click.echo(f"PASS Removed {deleted} expired token(s)")


@click.group('staff')
def staff_group():
    """Staff inspection commands."""


@staff_group.command('list')
@with_appcontext
def list_staff():
    """List staff with role and clock status."""
    staff = staff_service.list_staff()
    if not staff:
        click.echo("No staff found. Run: flask system init")
        return

    for member in staff:
        status = "IN " if member.is_clocked_in else "OUT"
        click.echo(f"[{status}] {member.id:>3}  {member.name:<24} {member.role:<10} {member.job_title}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(tokens_group)
    app.cli.add_command(staff_group)
