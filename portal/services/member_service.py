"""
Member Service

Registration, self-service profile updates, and admin member management.
"""
import logging
from datetime import date, datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Member
from ..utils.exceptions import MemberNotFoundError, ValidationError, AccountDeletionError
from . import auth_service
from .storage_service import upload_profile_picture

logger = logging.getLogger(__name__)

REGISTRATION_REQUIRED_FIELDS = (
    'email',
    'full_name',
    'address',
    'state_of_residence',
    'phone_number',
    'province',
    'region',
    'date_of_birth',
)


def clean_text(value) -> str:
    """Request values as stripped text; JSON numbers are accepted as their string form."""
    return '' if value is None else str(value).strip()


def escape_like(term: str) -> str:
    """Make % and _ match literally in a LIKE pattern (escape character is a backslash)."""
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def parse_date_of_birth(value) -> date:
    """Accept a date or a YYYY-MM-DD string (a trailing time part is ignored)."""
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError('Date of birth is required', field='date_of_birth')
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError('Date of birth must be in YYYY-MM-DD format', field='date_of_birth')


class MemberService:
    """Service for member registration and management."""

    # ==================== REGISTRATION ====================

    def register(self, data: Dict[str, Any], profile_picture=None) -> Dict[str, Any]:
        """
        Register a new member.

        Creates the login account, stores the optional profile picture,
        then inserts the member row. Returns the member and a bearer token.
        """
        password = str(data.get('password') or '')
        auth_service.validate_password(password, str(data.get('confirm_password') or ''))

        fields = {f: clean_text(data.get(f)) for f in REGISTRATION_REQUIRED_FIELDS}
        missing = [f for f, value in fields.items() if not value]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        date_of_birth = parse_date_of_birth(fields['date_of_birth'])

        account = auth_service.create_account(fields['email'], password)

        try:
            picture_url = None
            if profile_picture is not None and profile_picture.filename:
                picture_url = upload_profile_picture(profile_picture, account.id)

            member = Member(
                user_id=account.id,
                email=account.email,
                full_name=fields['full_name'],
                address=fields['address'],
                state_of_residence=fields['state_of_residence'],
                phone_number=fields['phone_number'],
                province=fields['province'],
                region=fields['region'],
                date_of_birth=date_of_birth,
                profile_picture_url=picture_url,
            )
            db.session.add(member)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f'Registered member {member.id} ({member.email})')
        return {
            'member': member,
            'token': auth_service.issue_token(account),
        }

    # ==================== SELF SERVICE ====================

    def get_for_user(self, user_id: int) -> Member:
        member = Member.query.filter_by(user_id=user_id).first()
        if not member:
            raise MemberNotFoundError()
        return member

    def update_profile(self, user_id: int, data: Dict[str, Any], profile_picture=None) -> Member:
        """
        Update the caller's own profile.
        Only province, region and the profile picture can change here.
        """
        member = self.get_for_user(user_id)

        for field in Member.SELF_EDITABLE_FIELDS:
            if field in data and data[field] is not None:
                setattr(member, field, clean_text(data[field]))

        if profile_picture is not None and profile_picture.filename:
            member.profile_picture_url = upload_profile_picture(profile_picture, user_id)

        db.session.commit()
        logger.info(f'Member {member.id} updated their profile')
        return member

    # ==================== ADMIN ====================

    def list_members(self, search: Optional[str] = None) -> List[Member]:
        """
        All members, newest first.

        search matches full name or email case-insensitively, and phone
        number as a plain substring.
        """
        query = Member.query
        if search:
            term = search.strip()
            search_pattern = f'%{escape_like(term)}%'
            query = query.filter(or_(
                Member.full_name.ilike(search_pattern, escape='\\'),
                Member.email.ilike(search_pattern, escape='\\'),
                Member.phone_number.contains(term, autoescape=True),
            ))
        return query.order_by(Member.created_at.desc(), Member.id.desc()).all()

    def get(self, member_id: int) -> Member:
        member = db.session.get(Member, member_id)
        if not member:
            raise MemberNotFoundError(member_id)
        return member

    def update_member(self, member_id: int, data: Dict[str, Any]) -> Member:
        """Admin edit of a member's details."""
        member = self.get(member_id)

        for field in Member.ADMIN_EDITABLE_FIELDS:
            if field not in data:
                continue
            value = data[field]
            if field == 'date_of_birth':
                value = parse_date_of_birth(value)
            elif field in ('full_name', 'email'):
                value = clean_text(value)
                if not value:
                    raise ValidationError(f'{field} cannot be empty', field=field)
            else:
                value = clean_text(value) or None
            setattr(member, field, value)

        db.session.commit()
        logger.info(f'Admin updated member {member.id}')
        return member

    def delete_member(self, member_id: int) -> Dict[str, Any]:
        """
        Delete a member and then the login account behind it.

        The member row (and its birthday posts) goes first. A member without
        an account, or whose account is already gone, is still a success.
        """
        member = self.get(member_id)
        user_id = member.user_id

        logger.info(f'Deleting member {member_id} from members table...')
        db.session.delete(member)
        db.session.commit()

        if not user_id:
            logger.info('Member has no login account, skipping account deletion')
            return {'success': True, 'account_deleted': False}

        try:
            account_deleted = auth_service.delete_account(user_id)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error deleting account {user_id}: {e}')
            raise AccountDeletionError(
                f'Member deleted from database, but failed to delete auth user: {e}'
            )

        if not account_deleted:
            logger.info('Account does not exist, skipping account deletion')

        logger.info(f'Member {member_id} and account deleted successfully')
        return {'success': True, 'account_deleted': account_deleted}


member_service = MemberService()
