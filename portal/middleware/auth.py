"""
Bearer Token Authentication Middleware.

Verifies portal tokens (JWT) from the Authorization header and loads the
calling account. Admin routes additionally require an Admin row for
that account.
"""
import hmac
from functools import wraps
from flask import request, jsonify, g, current_app

from ..services.auth_service import get_account_from_token


def get_bearer_token() -> str | None:
    """Extract the token from 'Authorization: Bearer <token>'."""
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        return auth_header.split(' ', 1)[1].strip() or None
    return None


def require_auth(f):
    """
    Decorator to require a signed-in account.

    Sets g.user (UserAccount).

    Usage:
        @require_auth
        def my_endpoint():
            account = g.user
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        account = get_account_from_token(get_bearer_token())
        if not account:
            return jsonify({'error': 'Not authenticated'}), 401

        g.user = account
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """
    Decorator to require an admin account.

    Sets g.user (UserAccount) and g.admin (Admin).
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        account = get_account_from_token(get_bearer_token())
        if not account:
            return jsonify({'error': 'Not authenticated'}), 401

        if not account.admin:
            return jsonify({'error': 'Admin access required'}), 403

        g.user = account
        g.admin = account.admin
        return f(*args, **kwargs)

    return decorated_function


def require_cron_secret(f):
    """
    Decorator for the scheduled-job trigger endpoint.

    Accepts 'Authorization: Bearer <CRON_SECRET>'. With no CRON_SECRET
    configured the endpoint is closed.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        secret = current_app.config.get('CRON_SECRET')
        token = get_bearer_token() or ''
        if not secret or not hmac.compare_digest(token.encode(), secret.encode()):
            return jsonify({'error': 'Invalid cron secret'}), 401
        return f(*args, **kwargs)

    return decorated_function
