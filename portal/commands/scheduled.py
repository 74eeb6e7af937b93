"""
CLI Commands for Scheduled Tasks.

Can be run manually or from cron instead of the in-process scheduler:

# Birthday notifications (daily at 7 AM)
0 7 * * * cd /app && flask scheduled birthday-notifications
"""

import click
from flask.cli import with_appcontext
from ..services.birthday_service import birthday_service


@click.group('scheduled')
def scheduled_cli():
    """Scheduled task commands."""
    pass


@scheduled_cli.command('birthday-notifications')
@click.option('--dry-run', is_flag=True, help='Preview without sending emails')
@click.option('--date', 'run_date', type=click.DateTime(formats=['%Y-%m-%d']),
              help='Run as if today were this date (YYYY-MM-DD)')
@with_appcontext
def birthday_notifications(dry_run, run_date):
    """
    Email every member whose birthday is today.

    Run this daily.
    """
    today = run_date.date() if run_date else None
    result = birthday_service.process_birthday_notifications(today=today, dry_run=dry_run)

    prefix = '[DRY RUN] ' if dry_run else ''
    click.echo(f"{prefix}Birthdays for {result['date']}: {result['totalBirthdays']}")

    for entry in result['emailResults']:
        if entry.get('skipped'):
            status = 'skipped (already greeted)'
        elif entry.get('dry_run'):
            status = 'would send'
        elif entry['success']:
            status = 'sent'
        else:
            status = f"FAILED: {entry['error']}"
        click.echo(f"  {entry['member']} <{entry['email']}>: {status}")


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(scheduled_cli)
