"""
Tests for the ways the daily birthday run is triggered.

- POST /api/scheduled/birthday-notifications (cron secret)
- GET /api/scheduled/birthday-notifications/preview (admin)
- flask scheduled birthday-notifications
- The in-process scheduler job
"""
from datetime import date
from unittest.mock import patch

from portal.services.birthday_service import birthday_service
from portal.services.email_service import email_service
from portal.utils import scheduler


def celebrant_dob():
    today = date.today()
    return date(2000, today.month, today.day)


class TestCronEndpoint:

    def test_rejects_missing_secret(self, client):
        response = client.post('/api/scheduled/birthday-notifications')
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid cron secret'

    def test_rejects_wrong_secret(self, client):
        response = client.post('/api/scheduled/birthday-notifications',
                               headers={'Authorization': 'Bearer wrong'})
        assert response.status_code == 401

    def test_rejects_non_ascii_secret(self, client):
        response = client.post('/api/scheduled/birthday-notifications',
                               headers={'Authorization': 'Bearer café'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid cron secret'

    def test_runs_notifications(self, client, make_member):
        make_member(full_name='Celebrant', date_of_birth=celebrant_dob())

        with patch.object(email_service, 'send_automatic_birthday_email', return_value={}) as send:
            response = client.post('/api/scheduled/birthday-notifications',
                                   headers={'Authorization': 'Bearer test-cron-secret'})

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['totalBirthdays'] == 1
        assert data['date'] == f'{date.today().month}/{date.today().day}'
        send.assert_called_once()

    def test_unexpected_error_returns_500(self, client):
        with patch.object(birthday_service, 'process_birthday_notifications',
                          side_effect=RuntimeError('database unavailable')):
            response = client.post('/api/scheduled/birthday-notifications',
                                   headers={'Authorization': 'Bearer test-cron-secret'})

        assert response.status_code == 500
        assert response.get_json()['error'] == 'database unavailable'

    def test_preview_is_a_dry_run(self, client, admin_headers, make_member):
        make_member(full_name='Celebrant', date_of_birth=celebrant_dob())

        with patch.object(email_service, 'send_automatic_birthday_email') as send:
            response = client.get('/api/scheduled/birthday-notifications/preview', headers=admin_headers)

        assert response.status_code == 200
        assert response.get_json()['dry_run'] is True
        send.assert_not_called()


class TestCli:

    def test_dry_run_for_date(self, app, make_member):
        make_member(full_name='Ada', date_of_birth=date(1990, 6, 15))

        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            'scheduled', 'birthday-notifications', '--dry-run', '--date', '2025-06-15'
        ])

        assert result.exit_code == 0
        assert '[DRY RUN] Birthdays for 6/15: 1' in result.output
        assert 'would send' in result.output

    def test_reports_failures(self, app, make_member):
        from portal.utils.exceptions import EmailDeliveryError
        make_member(full_name='Ada', date_of_birth=date(1990, 6, 15))

        with patch.object(email_service, 'send_automatic_birthday_email',
                          side_effect=EmailDeliveryError('Brevo API error: 500')):
            result = app.test_cli_runner().invoke(args=[
                'scheduled', 'birthday-notifications', '--date', '2025-06-15'
            ])

        assert result.exit_code == 0
        assert 'FAILED: Brevo API error: 500' in result.output


class TestSchedulerJob:

    def test_scheduler_disabled_under_testing(self, app):
        assert scheduler._scheduler is None or not scheduler._scheduler.running

    def test_job_runs_in_app_context(self, app, make_member):
        make_member(full_name='Celebrant', date_of_birth=celebrant_dob())

        with patch.object(email_service, 'send_automatic_birthday_email', return_value={}) as send:
            scheduler.run_birthday_notifications()

        send.assert_called_once()
