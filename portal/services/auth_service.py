"""
Account and token handling.

Tokens are HS256 JWTs signed with SECRET_KEY:
- sub: account id (string)
- email: account email
- iat / exp: issue and expiry time
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from flask import current_app

from ..extensions import db
from ..models import UserAccount, Admin
from ..utils.exceptions import AuthenticationError, DuplicateError, ValidationError

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def validate_password(password: str, confirm_password: Optional[str] = None) -> None:
    """Raise ValidationError if the password is unusable."""
    if confirm_password is not None and password != confirm_password:
        raise ValidationError('Passwords do not match', field='confirm_password')

    min_length = current_app.config['MIN_PASSWORD_LENGTH']
    if not password or len(password) < min_length:
        raise ValidationError(
            f'Password must be at least {min_length} characters',
            field='password'
        )


def create_account(email: str, password: str) -> UserAccount:
    """
    Create a login account. The caller commits.

    No email verification step: the account is usable immediately.
    """
    email = normalize_email(email)
    if not email:
        raise ValidationError('Email is required', field='email')

    if UserAccount.query.filter_by(email=email).first():
        raise DuplicateError('Account', email)

    account = UserAccount(email=email)
    account.set_password(password)
    db.session.add(account)
    db.session.flush()

    logger.info(f'Created account {account.id} for {email}')
    return account


def authenticate(email: str, password: str) -> UserAccount:
    """Check credentials and stamp last_login_at."""
    account = UserAccount.query.filter_by(email=normalize_email(email)).first()
    if not account or not account.check_password(password or ''):
        raise AuthenticationError('Invalid email or password')

    account.last_login_at = datetime.utcnow()
    db.session.commit()
    return account


def delete_account(user_id: int) -> bool:
    """
    Delete a login account.

    Returns:
        False if the account does not exist, True once deleted
    """
    account = db.session.get(UserAccount, user_id)
    if not account:
        return False

    db.session.delete(account)
    db.session.commit()
    logger.info(f'Deleted account {user_id}')
    return True


def grant_admin(account: UserAccount) -> Admin:
    """Make an account an admin (idempotent). The caller commits."""
    if account.admin:
        return account.admin
    admin = Admin(user_id=account.id)
    db.session.add(admin)
    db.session.flush()
    return admin


def issue_token(account: UserAccount) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(account.id),
        'email': account.email,
        'iat': now,
        'exp': now + timedelta(hours=current_app.config['JWT_EXPIRES_HOURS']),
    }
    return jwt.encode(
        payload,
        current_app.config['SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM']
    )


def decode_token(token: str) -> Optional[dict]:
    """
    Decode and verify a bearer token.

    Returns:
        Decoded payload or None if invalid
    """
    if not token:
        return None

    try:
        return jwt.decode(
            token,
            current_app.config['SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except jwt.ExpiredSignatureError:
        logger.info('Auth token expired')
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f'Invalid auth token: {e}')
        return None


def get_account_from_token(token: str) -> Optional[UserAccount]:
    payload = decode_token(token)
    if not payload:
        return None
    try:
        user_id = int(payload.get('sub', ''))
    except (TypeError, ValueError):
        return None
    return db.session.get(UserAccount, user_id)
