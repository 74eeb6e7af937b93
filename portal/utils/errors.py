"""
Error codes and JSON error bodies.

Every PortalError carries one of the ErrorCode members below, and the
app renders it as:

    {"error": {"message": "...", "code": "VALIDATION_ERROR", "field": "date_of_birth"}}

"field" only appears for validation errors tied to one input.
"""
import logging
from enum import Enum
from typing import Optional

from flask import jsonify

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Codes returned in error bodies."""

    PORTAL_ERROR = "PORTAL_ERROR"

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # 401 / 403
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"

    # 404
    NOT_FOUND = "NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"

    # 409
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"

    # 500 / 502
    ACCOUNT_DELETE_FAILED = "ACCOUNT_DELETE_FAILED"
    STORAGE_ERROR = "STORAGE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EMAIL_DELIVERY_ERROR = "EMAIL_DELIVERY_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_response(
    message: str,
    code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    field: Optional[str] = None,
    details: Optional[dict] = None
) -> tuple:
    """
    Build a (response, status) pair for Flask.

    details are logged only, never sent to the client.
    """
    if status_code >= 500:
        logger.error(f"API error [{code.value}]: {message}", extra={"details": details})
    else:
        logger.warning(f"API error [{code.value}]: {message}", extra={"details": details})

    body = {"message": message, "code": code.value}
    if field:
        body["field"] = field
    return jsonify({"error": body}), status_code


def portal_error_response(error) -> tuple:
    """Render a PortalError raised by a service."""
    return error_response(
        error.message,
        error.code,
        error.status_code,
        field=getattr(error, 'field', None),
    )


def internal_error(message: str = "An unexpected error occurred", details: Optional[dict] = None) -> tuple:
    return error_response(message, ErrorCode.INTERNAL_ERROR, 500, details=details)
