"""
Tests for the admin account CLI commands.
"""
from portal.models import Admin, UserAccount


class TestAdminsCommands:

    def test_create_admin_with_new_account(self, app):
        result = app.test_cli_runner().invoke(args=[
            'admins', 'create', '--email', 'Office@Example.org', '--password', 'office-pass'
        ])

        assert result.exit_code == 0
        assert 'Created account office@example.org' in result.output
        account = UserAccount.query.filter_by(email='office@example.org').first()
        assert account.is_admin
        assert account.check_password('office-pass')

    def test_create_admin_for_existing_account(self, app, sample_member):
        runner = app.test_cli_runner()
        runner.invoke(args=['admins', 'create', '--email', sample_member.email])
        result = runner.invoke(args=['admins', 'create', '--email', sample_member.email])

        assert result.exit_code == 0
        assert 'Created account' not in result.output
        assert Admin.query.count() == 1

    def test_create_admin_rejects_short_password(self, app):
        result = app.test_cli_runner().invoke(args=[
            'admins', 'create', '--email', 'new@example.org', '--password', 'abc'
        ])

        assert result.exit_code != 0
        assert 'Password must be at least 6 characters' in result.output
        assert UserAccount.query.count() == 0

    def test_list_admins(self, app, admin_account):
        result = app.test_cli_runner().invoke(args=['admins', 'list'])
        assert 'admin@example.org' in result.output
