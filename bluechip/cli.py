"""CLI commands.

Usage:
    flask --app bluechip.wsgi check-config     # list required settings that are empty
    flask --app bluechip.wsgi purge-sessions   # drop expired session records
"""

from __future__ import annotations

import sys

import click
from flask import current_app
from flask.cli import with_appcontext

from bluechip.config import REQUIRED_SETTINGS, missing_settings


@click.command("check-config")
@with_appcontext
def check_config_command():
    """Report which required settings are missing."""
    missing = missing_settings(current_app.config)
    for key in REQUIRED_SETTINGS:
        mark = "✗" if key in missing else "✓"
        click.echo(f"  {mark} {key}")
    if missing:
        click.echo(f"{len(missing)} required setting(s) missing", err=True)
        sys.exit(1)
    click.echo("All required settings present")


@click.command("purge-sessions")
@with_appcontext
def purge_sessions_command():
    """Remove expired sessions from the in-process store."""
    removed = current_app.session_interface.store.purge_expired()
    click.echo(f"Removed {removed} expired session(s)")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(check_config_command)
    app.cli.add_command(purge_sessions_command)
