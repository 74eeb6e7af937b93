"""
Email API endpoints.
"""
import logging
from flask import Blueprint, request, jsonify

from ..middleware.auth import require_admin
from ..services.email_service import email_service
from ..utils.exceptions import PortalError

logger = logging.getLogger(__name__)

email_bp = Blueprint('email', __name__)


@email_bp.route('/send-birthday-email', methods=['POST'])
@require_admin
def send_birthday_email():
    """
    Send a birthday email with a custom message.

    Body:
        to: recipient email
        name: recipient name
        message: plain-text message (line breaks are kept)
    """
    data = request.get_json(silent=True) or {}
    to = data.get('to')
    name = data.get('name')
    message = data.get('message')

    if not to or not name or not message:
        return jsonify({'error': 'Missing required fields'}), 400

    try:
        result = email_service.send_birthday_email(to, name, message)
    except PortalError as e:
        logger.error(f'Birthday email to {to} failed: {e.message}')
        return jsonify({'error': f'Failed to send email: {e.message}'}), 500

    return jsonify({'success': True, 'data': result})
