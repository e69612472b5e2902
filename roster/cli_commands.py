"""
Flask CLI commands for deployment and maintenance tasks.
"""

import click
from flask.cli import with_appcontext

from roster.admission import get_registration_ledger
from roster.errors import DuplicateUsername
from roster.records import create_master, get_settings


@click.command('init-settings')
@with_appcontext
def init_settings_command():
    """
    Create the feature settings row if it does not exist yet.

    Run once after `flask db upgrade` so the row exists before the first
    request instead of being created lazily.
    """
    settings = get_settings()
    click.echo(f"✓ Settings ready: {settings.to_dict()}")


@click.command('create-master')
@with_appcontext
@click.argument('username')
@click.password_option()
def create_master_command(username, password):
    """Create a master (admin) account."""
    try:
        master = create_master(username, password)
    except DuplicateUsername as e:
        raise click.ClickException(e.message)
    click.echo(f"✓ Master account '{master.username}' created")


@click.command('sweep-registration-ledger')
@with_appcontext
def sweep_registration_ledger_command():
    """Drop stale registration attempts from this process's ledger."""
    removed = get_registration_ledger().sweep()
    click.echo(f"Removed {removed} stale registration attempt(s)")


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(init_settings_command)
    app.cli.add_command(create_master_command)
    app.cli.add_command(sweep_registration_ledger_command)
