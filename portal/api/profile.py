"""
Member profile endpoints.
"""
from flask import Blueprint, request, jsonify, g

from . import get_request_data
from ..middleware.auth import require_auth
from ..services.member_service import member_service

profile_bp = Blueprint('profile', __name__)


@profile_bp.route('', methods=['GET'])
@require_auth
def get_profile():
    """The caller's member record."""
    member = member_service.get_for_user(g.user.id)
    return jsonify({'member': member.to_dict()})


@profile_bp.route('', methods=['PUT'])
@require_auth
def update_profile():
    """
    Update the caller's profile.

    Only province, region and profile_picture are accepted; anything else
    in the payload is ignored.
    """
    data = get_request_data()
    member = member_service.update_profile(
        g.user.id,
        data,
        request.files.get('profile_picture'),
    )

    return jsonify({
        'success': True,
        'message': 'Profile updated successfully!',
        'member': member.to_dict(),
    })
