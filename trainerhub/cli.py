"""
Flask CLI commands for scheduled maintenance.

Run with ``flask --app app sweep-past-due`` from cron or a scheduler.
"""
import click
from flask.cli import with_appcontext

from trainerhub.services.sweeper import sweep_past_due


@click.command('sweep-past-due')
@click.option('--today', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Reference date (YYYY-MM-DD), defaults to today')
@with_appcontext
def sweep_past_due_command(today):
    """Move overdue active subscriptions to past_due."""
    swept = sweep_past_due(today.date() if today else None)
    click.echo(f"Moved {swept} subscription(s) to past_due")


def register_commands(app):
    """Attach the CLI commands to the application."""
    app.cli.add_command(sweep_past_due_command)
