"""
Tests for birthday matching and the daily notification run.
"""
from datetime import date, datetime
from unittest.mock import patch

import pytest

from portal.extensions import db
from portal.models import BirthdayPost
from portal.services.birthday_service import (
    birthday_service,
    birthday_in_year,
    is_birthday_on,
    next_birthday,
    format_birthday,
    AUTOMATED_POST_CONTENT,
)
from portal.services.email_service import email_service
from portal.utils.exceptions import EmailDeliveryError, ConfirmationRequiredError


class TestBirthdayMatching:

    @pytest.mark.parametrize('dob,day,expected', [
        (date(1990, 3, 4), date(2025, 3, 4), True),
        (date(1990, 3, 4), date(2025, 3, 5), False),
        (date(1990, 3, 4), date(2025, 4, 3), False),
        (date(2000, 2, 29), date(2024, 2, 29), True),
        (date(2000, 2, 29), date(2025, 2, 28), True),
        (date(2000, 2, 29), date(2024, 2, 28), False),
        (None, date(2025, 3, 4), False),
    ])
    def test_is_birthday_on(self, dob, day, expected):
        assert is_birthday_on(dob, day) is expected

    def test_leap_day_birthday_in_common_year(self):
        assert birthday_in_year(date(2000, 2, 29), 2023) == date(2023, 2, 28)
        assert birthday_in_year(date(2000, 2, 29), 2028) == date(2028, 2, 29)

    def test_next_birthday_wraps_to_next_year(self):
        assert next_birthday(date(1990, 1, 5), date(2025, 12, 30)) == date(2026, 1, 5)
        assert next_birthday(date(1990, 12, 30), date(2025, 12, 30)) == date(2025, 12, 30)

    def test_format_birthday(self):
        assert format_birthday(date(2025, 3, 4)) == 'March 4'


class TestUpcomingBirthdays:

    def test_sorted_soonest_first(self, app, make_member):
        today = date(2025, 12, 20)
        make_member(full_name='January', date_of_birth=date(1985, 1, 2))
        make_member(full_name='Christmas', date_of_birth=date(1992, 12, 25))
        make_member(full_name='Today', date_of_birth=date(1999, 12, 20))
        make_member(full_name='Far Away', date_of_birth=date(1990, 6, 1))

        upcoming = birthday_service.get_upcoming_birthdays(days_ahead=30, today=today)

        assert [u['member']['full_name'] for u in upcoming] == ['Today', 'Christmas', 'January']
        assert [u['days_until'] for u in upcoming] == [0, 5, 13]
        assert upcoming[2]['next_birthday'] == '2026-01-02'
        assert upcoming[1]['birthday'] == 'December 25'


class TestPostBirthdayMessage:

    def test_email_failure_keeps_post(self, app, admin_account, make_member):
        member = make_member(full_name='Celebrant', date_of_birth=date(1990, 3, 4))

        with patch.object(email_service, 'send_birthday_email',
                          side_effect=EmailDeliveryError('Key not found')):
            result = birthday_service.post_birthday_message(
                member.id, admin=admin_account.admin, today=date(2025, 3, 4)
            )

        assert result['success'] is True
        assert result['email'] == {'success': False, 'error': 'Key not found'}
        assert result['message'] == (
            'Birthday post created, but email failed to send.\n\nError: Key not found'
        )
        assert BirthdayPost.query.filter_by(member_id=member.id).count() == 1

    def test_requires_confirmation_off_birthday(self, app, admin_account, make_member):
        member = make_member(date_of_birth=date(1990, 3, 4))

        with pytest.raises(ConfirmationRequiredError):
            birthday_service.post_birthday_message(
                member.id, admin=admin_account.admin, today=date(2025, 3, 5)
            )

    def test_standard_message_signature(self, app):
        message = birthday_service.standard_message('Ada Obi')
        assert message.startswith('Dear Ada Obi,')
        assert message.rstrip().endswith(app.config['ORGANIZATION_CHURCH'])


class TestBirthdayNotifications:
    """Tests for process_birthday_notifications."""

    RUN_DAY = date(2025, 3, 4)

    def test_no_birthdays(self, app, make_member):
        make_member(date_of_birth=date(1990, 7, 7))

        with patch.object(email_service, 'send_automatic_birthday_email') as send:
            result = birthday_service.process_birthday_notifications(today=self.RUN_DAY)

        assert result['success'] is True
        assert result['date'] == '3/4'
        assert result['totalBirthdays'] == 0
        assert result['emailResults'] == []
        send.assert_not_called()

    def test_emails_each_celebrant(self, app, make_member):
        first = make_member(full_name='Ada', date_of_birth=date(1990, 3, 4))
        second = make_member(full_name='Bola', date_of_birth=date(1975, 3, 4))
        make_member(full_name='Chidi', date_of_birth=date(1990, 3, 5))

        with patch.object(email_service, 'send_automatic_birthday_email',
                          return_value={'messageId': '<x@brevo>'}) as send:
            result = birthday_service.process_birthday_notifications(today=self.RUN_DAY)

        assert result['totalBirthdays'] == 2
        assert send.call_count == 2
        assert {r['member'] for r in result['emailResults']} == {'Ada', 'Bola'}
        assert all(r['success'] for r in result['emailResults'])

        posts = BirthdayPost.query.all()
        assert {p.member_id for p in posts} == {first.id, second.id}
        assert all(p.is_automated for p in posts)
        assert all(p.post_content == AUTOMATED_POST_CONTENT for p in posts)
        assert all(p.posted_at.date() == self.RUN_DAY for p in posts)

    def test_failure_is_recorded_and_run_continues(self, app, make_member):
        make_member(full_name='Ada', date_of_birth=date(1990, 3, 4))
        make_member(full_name='Bola', date_of_birth=date(1975, 3, 4))

        def fake_send(to_email, name):
            if name == 'Ada':
                raise EmailDeliveryError('Invalid recipient')
            return {'messageId': '<y@brevo>'}

        with patch.object(email_service, 'send_automatic_birthday_email', side_effect=fake_send):
            result = birthday_service.process_birthday_notifications(today=self.RUN_DAY)

        by_name = {r['member']: r for r in result['emailResults']}
        assert result['success'] is True
        assert by_name['Ada']['success'] is False
        assert by_name['Ada']['error'] == 'Invalid recipient'
        assert by_name['Bola']['success'] is True
        assert BirthdayPost.query.count() == 1

    def test_second_run_skips_greeted_members(self, app, make_member):
        make_member(full_name='Ada', date_of_birth=date(1990, 3, 4))

        with patch.object(email_service, 'send_automatic_birthday_email', return_value={}) as send:
            birthday_service.process_birthday_notifications(today=self.RUN_DAY)
            result = birthday_service.process_birthday_notifications(today=self.RUN_DAY)

        assert send.call_count == 1
        assert result['emailResults'][0]['skipped'] is True
        assert BirthdayPost.query.count() == 1

    def test_admin_post_without_admin_does_not_suppress_email(self, app, make_member):
        member = make_member(full_name='Ada', date_of_birth=date(1990, 3, 4))
        # An admin post whose admin account was removed
        db.session.add(BirthdayPost(
            member_id=member.id,
            post_content='Happy birthday from the team!',
            posted_by_admin_id=None,
            posted_at=datetime(2025, 3, 4, 8, 30),
        ))
        db.session.commit()

        with patch.object(email_service, 'send_automatic_birthday_email', return_value={}) as send:
            result = birthday_service.process_birthday_notifications(today=self.RUN_DAY)

        send.assert_called_once()
        assert 'skipped' not in result['emailResults'][0]
        assert BirthdayPost.query.filter_by(automated=True).count() == 1

    def test_leap_day_member_greeted_on_feb_28(self, app, make_member):
        make_member(full_name='Leapling', date_of_birth=date(2000, 2, 29))

        with patch.object(email_service, 'send_automatic_birthday_email', return_value={}) as send:
            result = birthday_service.process_birthday_notifications(today=date(2025, 2, 28))

        assert result['date'] == '2/28'
        assert result['totalBirthdays'] == 1
        send.assert_called_once()

    def test_dry_run_sends_nothing(self, app, make_member):
        make_member(full_name='Ada', date_of_birth=date(1990, 3, 4))

        with patch.object(email_service, 'send_automatic_birthday_email') as send:
            result = birthday_service.process_birthday_notifications(today=self.RUN_DAY, dry_run=True)

        send.assert_not_called()
        assert result['dry_run'] is True
        assert result['emailResults'][0]['dry_run'] is True
        assert BirthdayPost.query.count() == 0
