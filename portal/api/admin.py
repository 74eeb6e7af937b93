"""
Admin Dashboard API endpoints.

Member management, birthday calendar, birthday posts and dashboard settings.
All routes require an admin token.
"""
import re
from flask import Blueprint, request, jsonify, g, current_app

from . import is_truthy
from ..extensions import db
from ..middleware.auth import require_admin
from ..models import AdminSettings
from ..services.birthday_service import birthday_service
from ..services.member_service import member_service

admin_bp = Blueprint('admin', __name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


# ==================== MEMBERS ====================

@admin_bp.route('/members', methods=['GET'])
@require_admin
def list_members():
    """
    List members, newest first.

    Query params:
        search: matches name, email or phone number
    """
    members = member_service.list_members(request.args.get('search'))
    return jsonify({
        'members': [m.to_dict() for m in members],
        'total': len(members),
    })


@admin_bp.route('/members/<int:member_id>', methods=['GET'])
@require_admin
def get_member(member_id):
    member = member_service.get(member_id)
    return jsonify(member.to_dict())


@admin_bp.route('/members/<int:member_id>', methods=['PUT'])
@require_admin
def update_member(member_id):
    """Edit a member's details."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    member = member_service.update_member(member_id, data)
    return jsonify({
        'success': True,
        'message': 'Member updated successfully!',
        'member': member.to_dict(),
    })


@admin_bp.route('/members/<int:member_id>', methods=['DELETE'])
@require_admin
def delete_member(member_id):
    """
    Delete a member completely.

    Removes the member (and their birthday posts) and then the login
    account behind it.
    """
    result = member_service.delete_member(member_id)
    return jsonify({
        **result,
        'message': 'Member account completely deleted!',
    })


# ==================== BIRTHDAYS ====================

@admin_bp.route('/stats', methods=['GET'])
@require_admin
def get_stats():
    """Dashboard counters."""
    return jsonify(birthday_service.get_stats())


@admin_bp.route('/birthdays/upcoming', methods=['GET'])
@require_admin
def get_upcoming_birthdays():
    """Members with birthdays in the next N days (default 30)."""
    days = request.args.get('days', current_app.config['UPCOMING_BIRTHDAY_DAYS'], type=int)
    if days < 0 or days > 366:
        return jsonify({'error': 'days must be between 0 and 366'}), 400

    upcoming = birthday_service.get_upcoming_birthdays(days_ahead=days)
    return jsonify({
        'days': days,
        'upcoming': upcoming,
        'total': len(upcoming),
    })


@admin_bp.route('/birthdays/today', methods=['GET'])
@require_admin
def get_birthdays_today():
    members = birthday_service.get_members_with_birthday_today()
    return jsonify({
        'members': [m.to_dict() for m in members],
        'total': len(members),
    })


@admin_bp.route('/posts', methods=['GET'])
@require_admin
def get_recent_posts():
    """Most recent birthday posts, newest first."""
    limit = request.args.get('limit', current_app.config['RECENT_POSTS_LIMIT'], type=int)
    limit = max(1, min(limit, 100))
    posts = birthday_service.get_recent_posts(limit)
    return jsonify({'posts': [p.to_dict() for p in posts]})


@admin_bp.route('/members/<int:member_id>/birthday-post', methods=['POST'])
@require_admin
def post_birthday_message(member_id):
    """
    Post the standard birthday message for a member and email it.

    Body:
        confirm: required (true) when today is not the member's birthday
    """
    data = request.get_json(silent=True) or {}
    result = birthday_service.post_birthday_message(
        member_id,
        admin=g.admin,
        confirm=is_truthy(data.get('confirm', False)),
    )
    return jsonify(result), 201


# ==================== SETTINGS ====================

@admin_bp.route('/settings', methods=['GET'])
@require_admin
def get_settings():
    settings = AdminSettings.get()
    return jsonify({
        'success': True,
        'settings': settings.to_dict() if settings else {'notification_email': None},
    })


@admin_bp.route('/settings', methods=['PUT'])
@require_admin
def update_settings():
    """Save the notification email (creates the settings row on first save)."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'No data provided'}), 400

    notification_email = (data.get('notification_email') or '').strip()
    if notification_email and not EMAIL_PATTERN.match(notification_email):
        return jsonify({'error': 'Invalid notification email'}), 400

    settings = AdminSettings.get()
    if settings:
        settings.notification_email = notification_email or None
    else:
        settings = AdminSettings(notification_email=notification_email or None)
        db.session.add(settings)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': 'Settings saved successfully!',
        'settings': settings.to_dict(),
    })
