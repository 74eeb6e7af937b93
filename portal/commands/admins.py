"""
CLI Commands for database setup and admin accounts.
"""

import click
from flask.cli import with_appcontext
from ..extensions import db
from ..models import Admin, UserAccount
from ..services import auth_service
from ..utils.exceptions import ValidationError


@click.command('init-db')
@with_appcontext
def init_db():
    """Create all tables."""
    db.create_all()
    click.echo('Database tables created.')


@click.group('admins')
def admins_cli():
    """Admin account commands."""
    pass


@admins_cli.command('create')
@click.option('--email', required=True, help='Account email')
@click.option('--password', help='Password for a new account (prompted if needed)')
@with_appcontext
def create_admin(email, password):
    """
    Grant admin rights to an account.

    Creates the account first if the email is not registered yet.
    """
    account = UserAccount.query.filter_by(email=auth_service.normalize_email(email)).first()

    if not account:
        if not password:
            password = click.prompt('Password', hide_input=True, confirmation_prompt=True)
        try:
            auth_service.validate_password(password)
        except ValidationError as e:
            raise click.ClickException(e.message)
        account = auth_service.create_account(email, password)
        click.echo(f'Created account {account.email}')

    admin = auth_service.grant_admin(account)
    db.session.commit()
    click.echo(f'{account.email} is an admin (admin id {admin.id})')


@admins_cli.command('list')
@with_appcontext
def list_admins():
    """List admin accounts."""
    admins = Admin.query.order_by(Admin.id).all()
    if not admins:
        click.echo('No admins yet.')
        return
    for admin in admins:
        click.echo(f'  {admin.id}: {admin.account.email}')


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(init_db)
    app.cli.add_command(admins_cli)
