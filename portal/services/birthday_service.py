"""
Birthday Service

Birthday matching, admin birthday posts, and the daily notification run.
"""
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional, List, Dict, Any

from flask import current_app

from ..extensions import db
from ..models import Member, BirthdayPost, Admin
from ..utils.exceptions import ConfirmationRequiredError, PortalError
from .email_service import email_service, EmailService
from .member_service import member_service

logger = logging.getLogger(__name__)

AUTOMATED_POST_CONTENT = 'Happy Birthday! 🎉 Automated birthday wishes sent via email.'


def birthday_in_year(dob: date, year: int) -> date:
    """
    The date a birthday falls on in a given year.
    29 February is celebrated on 28 February in non-leap years.
    """
    if dob.month == 2 and dob.day == 29 and not calendar.isleap(year):
        return date(year, 2, 28)
    return date(year, dob.month, dob.day)


def is_birthday_on(dob: Optional[date], day: date) -> bool:
    """True if a member born on dob celebrates on day."""
    if dob is None:
        return False
    return birthday_in_year(dob, day.year) == day


def next_birthday(dob: date, today: date) -> date:
    """Next occurrence of the birthday, today included."""
    this_year = birthday_in_year(dob, today.year)
    if this_year < today:
        return birthday_in_year(dob, today.year + 1)
    return this_year


def format_birthday(day: date) -> str:
    """'March 4' style display."""
    return f'{day.strftime("%B")} {day.day}'


class BirthdayService:
    """Service for birthday greetings."""

    def __init__(self, emails: Optional[EmailService] = None):
        self.emails = emails or email_service

    # ==================== MESSAGES ====================

    def standard_message(self, full_name: str) -> str:
        """The greeting text admins post and email."""
        cfg = current_app.config
        return (
            f"Dear {full_name},\n"
            "\n"
            "Happy Birthday! 🎉🎂\n"
            "\n"
            f"On behalf of the {cfg['ORGANIZATION_DEPARTMENT']}, we are delighted to celebrate "
            "you today. Your presence and engagement with our platform mean a lot to us, and we "
            "truly appreciate your interest in what we are building.\n"
            "\n"
            "As you mark another year, we wish you good health, growth, success, and many reasons "
            "to smile. May this new chapter bring fresh opportunities, exciting ideas, and great "
            "achievements in all you do.\n"
            "\n"
            "Thank you for being part of our community. We look forward to continuing this journey "
            "with you and delivering even better digital solutions and experiences.\n"
            "\n"
            "Enjoy your special day and have a wonderful year ahead! 🎈\n"
            "\n"
            "Warm regards,\n"
            f"{cfg['ORGANIZATION_DEPARTMENT']}\n"
            f"{cfg['ORGANIZATION_DIRECTORATE']}\n"
            f"{cfg['ORGANIZATION_CHURCH']}"
        )

    # ==================== QUERIES ====================

    def members_with_birthday_on(self, day: date, members: Optional[List[Member]] = None) -> List[Member]:
        """Filter members (all of them by default) down to those celebrating on day."""
        if members is None:
            members = Member.query.all()
        return [m for m in members if is_birthday_on(m.date_of_birth, day)]

    def get_members_with_birthday_today(self, today: Optional[date] = None) -> List[Member]:
        return self.members_with_birthday_on(today or date.today())

    def get_upcoming_birthdays(self, days_ahead: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Members with birthdays in the next N days, soonest first."""
        today = today or date.today()
        upcoming = []

        for member in Member.query.all():
            if not member.date_of_birth:
                continue
            occurrence = next_birthday(member.date_of_birth, today)
            days_until = (occurrence - today).days
            if 0 <= days_until <= days_ahead:
                upcoming.append({
                    'member': member.to_dict(),
                    'birthday': format_birthday(occurrence),
                    'next_birthday': occurrence.isoformat(),
                    'days_until': days_until,
                })

        upcoming.sort(key=lambda x: (x['days_until'], x['member']['full_name']))
        return upcoming

    def get_recent_posts(self, limit: int = 10) -> List[BirthdayPost]:
        return BirthdayPost.query.order_by(
            BirthdayPost.posted_at.desc(), BirthdayPost.id.desc()
        ).limit(limit).all()

    def has_automated_post_on(self, member_id: int, day: date) -> bool:
        start = datetime.combine(day, datetime.min.time())
        end = start + timedelta(days=1)
        return BirthdayPost.query.filter(
            BirthdayPost.member_id == member_id,
            BirthdayPost.automated.is_(True),
            BirthdayPost.posted_at >= start,
            BirthdayPost.posted_at < end,
        ).first() is not None

    # ==================== ADMIN POSTS ====================

    def post_birthday_message(
        self,
        member_id: int,
        admin: Admin,
        confirm: bool = False,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Record a birthday post for a member and email them the greeting.

        When it is not the member's birthday the caller must pass
        confirm=True. A failed email does not undo the post.
        """
        today = today or date.today()
        member = member_service.get(member_id)
        birthday_today = is_birthday_on(member.date_of_birth, today)

        if not birthday_today and not confirm:
            raise ConfirmationRequiredError(
                f"Today is not {member.full_name}'s birthday. "
                "Are you sure you want to send a birthday message?"
            )

        message = self.standard_message(member.full_name)
        post = BirthdayPost(
            member_id=member.id,
            post_content=message,
            posted_by_admin_id=admin.id,
        )
        db.session.add(post)
        db.session.commit()
        logger.info(f'Admin {admin.id} posted birthday message for member {member.id}')

        email_result = {'success': False, 'error': None}
        try:
            email_result['data'] = self.emails.send_birthday_email(member.email, member.full_name, message)
            email_result['success'] = True
        except PortalError as e:
            logger.warning(f'Birthday email to {member.email} failed: {e.message}')
            email_result['error'] = e.message

        if birthday_today:
            if email_result['success']:
                notice = f'Birthday email sent successfully to {member.full_name}! 🎉'
            else:
                notice = (
                    'Birthday post created, but email failed to send.\n\n'
                    f"Error: {email_result['error']}"
                )
        else:
            notice = f'Birthday message posted for {member.full_name}.'

        return {
            'success': True,
            'message': notice,
            'is_birthday_today': birthday_today,
            'post': post.to_dict(),
            'email': email_result,
        }

    # ==================== DAILY RUN ====================

    def process_birthday_notifications(self, today: Optional[date] = None, dry_run: bool = False) -> Dict[str, Any]:
        """
        Email every member whose birthday is today.

        Each successful email is recorded as an automated birthday post.
        Failures are logged and reported, then the run moves on. Members
        that already got an automated post today are skipped.
        """
        today = today or date.today()
        date_label = f'{today.month}/{today.day}'
        logger.info(f'Checking birthdays for {date_label}')

        birthday_members = self.members_with_birthday_on(today)
        logger.info(f'Found {len(birthday_members)} members with birthdays today')

        email_results = []
        for member in birthday_members:
            entry = {'member': member.full_name, 'email': member.email}

            if self.has_automated_post_on(member.id, today):
                logger.info(f'Already greeted {member.full_name} today, skipping')
                email_results.append({**entry, 'success': True, 'skipped': True})
                continue

            if dry_run:
                email_results.append({**entry, 'success': True, 'dry_run': True})
                continue

            try:
                logger.info(f'Sending birthday email to {member.full_name} ({member.email})')
                result = self.emails.send_automatic_birthday_email(member.email, member.full_name)
            except PortalError as e:
                logger.error(f'Failed to send email to {member.full_name}: {e.message}')
                email_results.append({**entry, 'success': False, 'error': e.message})
                continue

            db.session.add(BirthdayPost(
                member_id=member.id,
                post_content=AUTOMATED_POST_CONTENT,
                posted_by_admin_id=None,
                automated=True,
                posted_at=datetime.combine(today, datetime.utcnow().time()),
            ))
            db.session.commit()
            email_results.append({**entry, 'success': True, 'result': result})

        return {
            'success': True,
            'date': date_label,
            'totalBirthdays': len(birthday_members),
            'emailResults': email_results,
            'dry_run': dry_run,
        }

    def get_stats(self, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        return {
            'total_members': Member.query.count(),
            'birthdays_today': len(self.get_members_with_birthday_today(today)),
            'upcoming_birthdays': len(self.get_upcoming_birthdays(
                current_app.config['UPCOMING_BIRTHDAY_DAYS'], today
            )),
            'total_posts': BirthdayPost.query.count(),
        }


birthday_service = BirthdayService()
