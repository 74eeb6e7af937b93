"""
Business-logic exceptions for the member portal.

Services raise these; the app's PortalError handler turns them into
{"error": {"message", "code"}} responses with each class's status_code.
"""
from .errors import ErrorCode


class PortalError(Exception):
    """Base exception for all portal business logic errors."""

    status_code = 400

    def __init__(self, message: str, code: ErrorCode = ErrorCode.PORTAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(PortalError):
    """Resource not found."""

    status_code = 404

    def __init__(self, resource: str, identifier=None, code: ErrorCode = ErrorCode.NOT_FOUND):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with ID {identifier} not found"
        super().__init__(message, code)


class MemberNotFoundError(NotFoundError):
    """Member not found."""

    def __init__(self, identifier=None):
        super().__init__("Member", identifier, ErrorCode.MEMBER_NOT_FOUND)


class ValidationError(PortalError):
    """Invalid input data. field names the offending input, if any."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, ErrorCode.VALIDATION_ERROR)


class DuplicateError(PortalError):
    """Resource already exists."""

    status_code = 409

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} already exists"
        if identifier:
            message = f"{resource} with {identifier} already exists"
        super().__init__(message, ErrorCode.DUPLICATE_ENTRY)


class ConfirmationRequiredError(PortalError):
    """The action needs an explicit confirmation from the caller."""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIRMATION_REQUIRED)


class AuthenticationError(PortalError):
    """Missing or invalid credentials."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, ErrorCode.AUTH_REQUIRED)


class AuthorizationError(PortalError):
    """User not authorized for this operation."""

    status_code = 403

    def __init__(self, message: str = "Not authorized for this operation"):
        super().__init__(message, ErrorCode.AUTHORIZATION_ERROR)


class AccountDeletionError(PortalError):
    """The member row is gone but its login account could not be removed."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ACCOUNT_DELETE_FAILED)


class EmailDeliveryError(PortalError):
    """The transactional email provider rejected or failed the request."""

    status_code = 502

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(message, ErrorCode.EMAIL_DELIVERY_ERROR)


class StorageError(PortalError):
    """Profile picture could not be stored."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.STORAGE_ERROR)


class ConfigurationError(PortalError):
    """Application configuration error."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR)
