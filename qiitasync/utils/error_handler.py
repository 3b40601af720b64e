"""
Error types and logging utilities for syncing posts with Qiita.

The model layer raises the exceptions defined here and never logs them;
the CLI catches them and reports through ErrorHandler.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests


class QiitaSyncError(Exception):
    """Base exception for qiitasync errors."""


class PostFormatError(QiitaSyncError):
    """Raised when local post text cannot be decoded."""


class MissingMetaBlockError(PostFormatError):
    """Raised when the text does not open with the metadata comment."""

    def __init__(self, message: str = "post must start with a <!-- ... --> metadata block"):
        super().__init__(message)


class MissingTitleError(PostFormatError):
    """Raised when no level-1 heading follows the metadata block."""

    def __init__(self, message: str = "a level-1 heading must follow the metadata block"):
        super().__init__(message)


class InvalidTagFormatError(PostFormatError):
    """Raised when a tag entry is neither a scalar nor a single-key mapping."""

    def __init__(self, entry=None):
        super().__init__(f"invalid tag format: {entry!r}")
        self.entry = entry


class InvalidMetaValueError(PostFormatError):
    """Raised when a metadata key holds a value of the wrong type."""

    def __init__(self, key: str, value=None, expected: str = None):
        message = f"invalid value for {key}: {value!r}"
        if expected:
            message = f"{message}, expected {expected}"
        super().__init__(message)
        self.key = key
        self.value = value


class EmptyIDError(QiitaSyncError):
    """Raised when a remote operation needs an ID and the post has none."""

    def __init__(self, operation: str = None):
        message = "post has no ID"
        if operation:
            message = f"cannot {operation} a post without ID"
        super().__init__(message)
        self.operation = operation


@dataclass(frozen=True)
class ValidationStatus:
    """Status of a single failing field."""

    required: bool = False


class InvalidPostError(QiitaSyncError):
    """Raised by callers that enforce Post.validate()."""

    def __init__(self, errors: Dict[str, ValidationStatus]):
        fields = ", ".join(sorted(errors))
        super().__init__(f"invalid post: missing {fields}")
        self.errors = errors


class InvalidTotalCountError(QiitaSyncError):
    """Raised when a listing cannot be paginated by its total count."""

    def __init__(self, message: str, total_count=None):
        super().__init__(message)
        self.total_count = total_count


class AuthenticationError(QiitaSyncError):
    """Raised when no access token is configured."""


class APIError(QiitaSyncError):
    """Base exception for failed API calls."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseError(APIError):
    """The API returned a structured error payload."""

    def __init__(self, error_type: str, message: str, status_code: int = None):
        super().__init__(f"{error_type}: {message}", status_code=status_code)
        self.type = error_type
        self.message = message


class StatusError(APIError):
    """The API returned a non-2xx status without a structured error."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"unexpected status code {status_code}", status_code=status_code)
        self.body = body


class ErrorHandler:
    """
    Formats error and success log lines for CLI operations.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance. If None, creates a new logger.
        """
        self.logger = logger or logging.getLogger(__name__)

    def log_api_error(
        self,
        error: Exception,
        title: str = None,
        operation: str = None,
        additional_context: Dict = None,
    ) -> None:
        """
        Log detailed error information for a failed operation.

        Args:
            error: The exception that occurred
            title: Title of the post being processed (if applicable)
            operation: The operation being performed (create, update, fetch, etc.)
            additional_context: Additional context information
        """
        error_details = {
            "title": title or "Unknown",
            "operation": operation or "Unknown",
            "error_type": type(error).__name__,
            "error_message": str(error),
        }

        if additional_context:
            error_details.update(additional_context)

        if isinstance(error, APIError) and error.status_code is not None:
            error_details["status_code"] = error.status_code

        self.logger.error(
            f"Error on Qiita: {operation} failed for '{title}' - {str(error)}",
            extra={"error_details": error_details},
        )

    def log_authentication_error(self, error_message: str = None) -> None:
        """
        Log authentication errors with setup guidance.

        Args:
            error_message: Optional specific error message
        """
        message = "Authentication failed for Qiita"
        if error_message:
            message = f"{message}: {error_message}"

        self.logger.error(
            f"{message}. Please check your QIITA_ACCESS_TOKEN environment variable. "
            "Get a token from https://qiita.com/settings/applications"
        )

    def log_success(
        self,
        title: str,
        action: str,
        post_id: str = None,
        additional_info: Dict = None,
    ) -> None:
        """
        Log a successful operation.

        Args:
            title: Title of the post
            action: Action performed (created, updated, fetched, deleted, saved)
            post_id: ID of the post (if available)
            additional_info: Additional information to log
        """
        message = f"SUCCESS: {action.capitalize()} '{title}'"

        if post_id:
            message += f" (ID: {post_id})"

        if additional_info:
            details = ", ".join([f"{k}: {v}" for k, v in additional_info.items()])
            message += f" - {details}"

        self.logger.info(message)


def handle_api_response(response: requests.Response):
    """
    Turn an HTTP response into a (body, status, headers) triple.

    Args:
        response: HTTP response object

    Returns:
        Tuple of response text, status code and headers

    Raises:
        ResponseError: For error payloads of the form {"type": ..., "message": ...}
        StatusError: For any other non-2xx response
    """
    status_code = response.status_code
    if 200 <= status_code < 300:
        return response.text, status_code, response.headers

    try:
        error_data = response.json()
    except ValueError:
        raise StatusError(status_code, response.text)

    if isinstance(error_data, dict) and "type" in error_data and "message" in error_data:
        raise ResponseError(error_data["type"], error_data["message"], status_code)

    raise StatusError(status_code, json.dumps(error_data))
