"""
Scheduled Tasks API endpoints.

- External cron trigger for the daily birthday run (CRON_SECRET)
- Admin preview of who the run would greet today
"""
import logging
from flask import Blueprint, jsonify

from ..middleware.auth import require_admin, require_cron_secret
from ..services.birthday_service import birthday_service

logger = logging.getLogger(__name__)

scheduled_tasks_bp = Blueprint('scheduled_tasks', __name__)


@scheduled_tasks_bp.route('/birthday-notifications', methods=['POST'])
@require_cron_secret
def run_birthday_notifications():
    """Email today's birthday members. Meant for an external cron."""
    try:
        result = birthday_service.process_birthday_notifications()
    except Exception as e:
        logger.exception('Error in birthday notification run')
        return jsonify({'error': str(e)}), 500

    return jsonify(result)


@scheduled_tasks_bp.route('/birthday-notifications/preview', methods=['GET'])
@require_admin
def preview_birthday_notifications():
    """What the next run would do, without sending anything."""
    return jsonify(birthday_service.process_birthday_notifications(dry_run=True))
