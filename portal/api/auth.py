"""
Auth API endpoints.

Public registration, sign-in and sign-out for members and admins.
"""
from flask import Blueprint, request, jsonify, g

from . import get_request_data
from ..middleware.auth import require_auth
from ..services import auth_service
from ..services.member_service import member_service

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Register a new member.

    Accepts multipart/form-data (with an optional 'profile_picture' file)
    or JSON. No email verification step: the member can sign in at once.

    Returns:
        201 with the member and a bearer token
    """
    data = get_request_data()
    result = member_service.register(data, request.files.get('profile_picture'))

    return jsonify({
        'success': True,
        'member': result['member'].to_dict(),
        'token': result['token'],
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email/password for a bearer token."""
    data = request.get_json(silent=True) or {}
    email = data.get('email')
    password = data.get('password')

    if not email or not password:
        return jsonify({'error': 'Email and password are required'}), 400

    account = auth_service.authenticate(email, password)

    return jsonify({
        'success': True,
        'token': auth_service.issue_token(account),
        'is_admin': account.is_admin,
        'account': account.to_dict(),
    })


@auth_bp.route('/logout', methods=['POST'])
@require_auth
def logout():
    """Tokens are stateless; the client discards its copy."""
    return jsonify({'success': True})


@auth_bp.route('/me', methods=['GET'])
@require_auth
def me():
    """The signed-in account."""
    return jsonify(g.user.to_dict())
