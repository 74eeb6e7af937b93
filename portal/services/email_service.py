"""
Email Notification Service for the member portal.

Handles transactional birthday emails:
- Admin-sent greetings with a free-text message
- Automated greetings from the daily birthday job

Delivery goes through Brevo's transactional API (default) or SendGrid,
selected by EMAIL_PROVIDER.
"""
import logging
import re
from pathlib import Path
from typing import Dict, Any

import requests
from flask import current_app
from markupsafe import escape
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To

from ..utils.exceptions import EmailDeliveryError, ConfigurationError

logger = logging.getLogger(__name__)

BIRTHDAY_SUBJECT = 'Happy Birthday from the DTCE ICT DEPARTMENT'


class EmailService:
    """Service for sending transactional emails."""

    BREVO_URL = 'https://api.brevo.com/v3/smtp/email'

    DEFAULT_BRAND_COLOR = '#667eea'
    DEFAULT_BRAND_COLOR_DARK = '#764ba2'

    # HTML template file mappings
    HTML_TEMPLATE_FILES = {
        'birthday_custom': 'birthday_custom.html',
        'birthday_automatic': 'birthday_automatic.html',
    }

    SUPPORTED_PROVIDERS = ('brevo', 'sendgrid')

    # ==================== CONFIG ====================

    @property
    def provider(self) -> str:
        return (current_app.config.get('EMAIL_PROVIDER') or 'brevo').lower()

    @property
    def sender(self) -> Dict[str, str]:
        return {
            'name': current_app.config['EMAIL_SENDER_NAME'],
            'email': current_app.config['EMAIL_SENDER_EMAIL'],
        }

    def _organization(self) -> Dict[str, str]:
        cfg = current_app.config
        return {
            'department': cfg['ORGANIZATION_DEPARTMENT'],
            'directorate': cfg['ORGANIZATION_DIRECTORATE'],
            'church': cfg['ORGANIZATION_CHURCH'],
            'brand_color': self.DEFAULT_BRAND_COLOR,
            'brand_color_dark': self.DEFAULT_BRAND_COLOR_DARK,
        }

    # ==================== TEMPLATES ====================

    def _load_html_template(self, template_key: str) -> str:
        """Load an HTML template file."""
        if template_key not in self.HTML_TEMPLATE_FILES:
            raise KeyError(f'Unknown email template: {template_key}')

        templates_dir = Path(__file__).parent.parent / 'templates' / 'emails'
        template_path = templates_dir / self.HTML_TEMPLATE_FILES[template_key]
        return template_path.read_text(encoding='utf-8')

    def render_html_template(self, template_key: str, data: Dict[str, Any]) -> str:
        """
        Render an HTML email template.

        Values are HTML-escaped except keys ending in "_html", which the
        caller has already made safe.
        """
        html_content = self._load_html_template(template_key)
        context = {**self._organization(), **data}

        for key, value in context.items():
            text = '' if value is None else str(value)
            if not key.endswith('_html'):
                text = str(escape(text))
            html_content = html_content.replace('{{' + key + '}}', text)

        # Clean up any remaining unmatched placeholders
        return re.sub(r'\{\{[^}]+\}\}', '', html_content)

    @staticmethod
    def message_to_html(message: str) -> str:
        """Escape a plain-text message and keep its line breaks."""
        return str(escape(message.strip())).replace('\n', '<br>')

    # ==================== DELIVERY ====================

    def send_html_email(
        self,
        to_email: str,
        to_name: str,
        subject: str,
        html_body: str,
    ) -> Dict[str, Any]:
        """
        Send an email with pre-rendered HTML content.

        Returns the provider's response data.

        Raises:
            ConfigurationError: unknown provider or missing API key
            EmailDeliveryError: the provider call failed
        """
        provider = self.provider
        if provider == 'brevo':
            return self._send_brevo(to_email, to_name, subject, html_body)
        if provider == 'sendgrid':
            return self._send_sendgrid(to_email, to_name, subject, html_body)
        raise ConfigurationError(
            f"Unknown EMAIL_PROVIDER '{provider}'. Use one of: {', '.join(self.SUPPORTED_PROVIDERS)}"
        )

    def _send_brevo(self, to_email: str, to_name: str, subject: str, html_body: str) -> Dict[str, Any]:
        api_key = current_app.config.get('BREVO_API_KEY')
        if not api_key:
            logger.warning('Brevo API key not configured, email not sent')
            raise EmailDeliveryError('Brevo API key not configured')

        payload = {
            'sender': self.sender,
            'to': [{'email': to_email, 'name': to_name}],
            'subject': subject,
            'htmlContent': html_body,
        }
        headers = {
            'Accept': 'application/json',
            'Content-Type': 'application/json',
            'api-key': api_key,
        }

        try:
            response = requests.post(
                self.BREVO_URL,
                json=payload,
                headers=headers,
                timeout=current_app.config.get('EMAIL_TIMEOUT', 15)
            )
        except requests.RequestException as e:
            logger.error(f'Brevo request failed for {to_email}: {e}')
            raise EmailDeliveryError(str(e), original_error=e)

        try:
            data = response.json()
        except ValueError:
            data = {'raw': response.text}

        if response.status_code >= 400:
            message = data.get('message') if isinstance(data, dict) else None
            message = message or f'Brevo API error: {response.status_code}'
            logger.error(f'Brevo rejected email to {to_email}: {message}')
            raise EmailDeliveryError(message)

        logger.info(f'Email sent to {to_email} via Brevo: {subject}')
        return data

    def _send_sendgrid(self, to_email: str, to_name: str, subject: str, html_body: str) -> Dict[str, Any]:
        api_key = current_app.config.get('SENDGRID_API_KEY')
        if not api_key:
            logger.warning('SendGrid API key not configured, email not sent')
            raise EmailDeliveryError('SendGrid API key not configured')

        message = Mail(
            from_email=Email(email=self.sender['email'], name=self.sender['name']),
            to_emails=To(email=to_email, name=to_name),
            subject=subject,
            html_content=html_body
        )

        try:
            response = SendGridAPIClient(api_key).send(message)
        except Exception as e:
            # python-http-client raises one HTTPError subclass per status code
            logger.error(f'SendGrid send failed for {to_email}: {e}')
            raise EmailDeliveryError(str(e), original_error=e)

        logger.info(f'Email sent to {to_email} via SendGrid: {subject}')
        return {'status_code': response.status_code}

    # ==================== BIRTHDAY EMAILS ====================

    def send_birthday_email(self, to_email: str, name: str, message: str) -> Dict[str, Any]:
        """Send an admin-written birthday greeting."""
        html_body = self.render_html_template('birthday_custom', {
            'name': name,
            'message_html': self.message_to_html(message),
        })
        logger.info(f'Sending birthday email to: {to_email}')
        return self.send_html_email(to_email, name, BIRTHDAY_SUBJECT, html_body)

    def send_automatic_birthday_email(self, to_email: str, name: str) -> Dict[str, Any]:
        """Send the fixed greeting used by the daily birthday job."""
        html_body = self.render_html_template('birthday_automatic', {'name': name})
        return self.send_html_email(to_email, name, BIRTHDAY_SUBJECT, html_body)


email_service = EmailService()