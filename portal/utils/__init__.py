"""
Utility modules for the member portal.
"""
from .logging_config import setup_logging, JSONFormatter
from .errors import (
    ErrorCode,
    error_response,
    portal_error_response,
    internal_error
)
from .exceptions import (
    PortalError,
    NotFoundError,
    MemberNotFoundError,
    ValidationError,
    DuplicateError,
    ConfirmationRequiredError,
    AuthenticationError,
    AuthorizationError,
    AccountDeletionError,
    EmailDeliveryError,
    StorageError,
    ConfigurationError
)
