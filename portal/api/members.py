"""
Member deletion endpoint kept at its historical path.

Same behaviour as DELETE /api/admin/members/<id>, but the id arrives in
the JSON body as userId.
"""
from flask import Blueprint, request, jsonify

from ..middleware.auth import require_admin
from ..services.member_service import member_service

members_bp = Blueprint('members', __name__)


@members_bp.route('/delete-member', methods=['DELETE'])
@require_admin
def delete_member():
    data = request.get_json(silent=True) or {}
    member_id = data.get('userId')

    if not member_id:
        return jsonify({'error': 'User ID is required'}), 400

    try:
        member_id = int(member_id)
    except (TypeError, ValueError):
        return jsonify({'error': 'User ID must be an integer'}), 400

    result = member_service.delete_member(member_id)
    return jsonify(result)
