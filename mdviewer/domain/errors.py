"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions carry the user-facing messaging for the HTTP layer.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    NOT_FOUND = "not_found"
    NOT_INSTALLED = "not_installed"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    UNSUPPORTED_FILE = "unsupported_file"
    CREDENTIAL_UNRESOLVED = "credential_unresolved"
    UPSTREAM_FETCH_FAILED = "upstream_fetch_failed"
    PERSIST_FAILED = "persist_failed"
    NOTIFICATION_FAILED = "notification_failed"
    UNAUTHORIZED = "unauthorized"
    INVALID_REQUEST = "invalid_request"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.NOT_FOUND: {
        "title": "Not Found",
        "message": "This markdown file has expired or doesn't exist.",
        "action": "Please re-upload the file to Slack to generate a new link.",
    },
    ErrorCategory.NOT_INSTALLED: {
        "title": "Not Installed",
        "message": "The app has not been installed in this workspace yet.",
        "action": "Install the app from the install page and try again.",
    },
    ErrorCategory.STORAGE_UNAVAILABLE: {
        "title": "Temporarily Unavailable",
        "message": "The storage backend is temporarily unavailable.",
        "action": "Please try again in a few moments.",
    },
    ErrorCategory.UNSUPPORTED_FILE: {
        "title": "Unsupported File",
        "message": "Only markdown and HTML files can be rendered.",
        "action": "Upload a .md, .markdown, .html or .htm file.",
    },
    ErrorCategory.CREDENTIAL_UNRESOLVED: {
        "title": "Missing Credentials",
        "message": "No bot token is available for this workspace.",
        "action": "Reinstall the app in this workspace.",
    },
    ErrorCategory.UPSTREAM_FETCH_FAILED: {
        "title": "Download Failed",
        "message": "The shared file could not be downloaded from Slack.",
        "action": "Check that the bot can access the channel and try again.",
    },
    ErrorCategory.PERSIST_FAILED: {
        "title": "Save Failed",
        "message": "The rendered document could not be stored.",
        "action": "Please re-upload the file.",
    },
    ErrorCategory.NOTIFICATION_FAILED: {
        "title": "Notification Failed",
        "message": "The rendered link could not be posted to the channel.",
        "action": "Check that the bot is a member of the channel.",
    },
    ErrorCategory.UNAUTHORIZED: {
        "title": "Unauthorized",
        "message": "A valid API key is required for this endpoint.",
        "action": "Send the configured key in the X-API-Key header.",
    },
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request could not be processed.",
        "action": "Check the request parameters and try again.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred.",
        "action": "Please try again later.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions can optionally wrap original errors for context.
    """

    category = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class StorageError(DomainError):
    """Raised when a store cannot complete an operation."""

    category = ErrorCategory.STORAGE_UNAVAILABLE


class BackendUnavailableError(StorageError):
    """
    Raised when the remote store cannot be reached.

    Callers must not treat this as "not found".
    """
    pass


class InstallationNotFoundError(DomainError):
    """Raised when a workspace has no installation record."""

    category = ErrorCategory.NOT_INSTALLED

    def __init__(self, tenant_id: str):
        super().__init__(f"No installation for workspace {tenant_id}")
        self.tenant_id = tenant_id


class ValidationRejectedError(DomainError):
    """Raised when a shared file is not a supported document type."""

    category = ErrorCategory.UNSUPPORTED_FILE


class CredentialUnresolvedError(DomainError):
    """Raised when no bot token can be resolved for a workspace."""

    category = ErrorCategory.CREDENTIAL_UNRESOLVED


class UpstreamFetchError(DomainError):
    """Raised when a file download or platform API call fails."""

    category = ErrorCategory.UPSTREAM_FETCH_FAILED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, original_error)
        self.status_code = status_code


class PersistError(DomainError):
    """Raised when a rendered document cannot be written to the artifact store."""

    category = ErrorCategory.PERSIST_FAILED


class NotificationError(DomainError):
    """Raised when the platform rejects an outbound message."""

    category = ErrorCategory.NOTIFICATION_FAILED


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    Bridges domain errors with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API response."""
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code
