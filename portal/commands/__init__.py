"""
CLI Commands for the member portal.

Usage:
    flask init-db                                      # Create tables
    flask admins create --email admin@example.org      # Grant admin rights
    flask admins list                                  # List admins

    flask scheduled birthday-notifications             # Email today's birthdays
    flask scheduled birthday-notifications --dry-run   # Preview only
"""
from .admins import init_app as init_admin_commands
from .scheduled import init_app as init_scheduled_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_admin_commands(app)
    init_scheduled_commands(app)
