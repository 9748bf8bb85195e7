"""
Error taxonomy for the WebP API.

Every error a request can produce is an ApiError subclass. The Flask
error handlers in app.py render them as:
    {"success": false, "error": <kind>, "message": <detail>}
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base exception for errors surfaced to API callers."""
    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, reason: str | None = None):
        self.message = message
        self.reason = reason or type(self).__name__
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.error,
            "message": self.message,
        }


class ValidationError(ApiError):
    """Raised when the request is malformed or too large."""
    status_code = 400
    error = "Bad Request"

    MISSING_IMAGE = "MissingImage"
    MISSING_FILENAME = "MissingFilename"
    SIZE_EXCEEDED = "SizeExceeded"
    MALFORMED_OPTIONS = "MalformedOptions"
    MALFORMED_BODY = "MalformedBody"
    DUPLICATE_IMAGE = "DuplicateImage"
    DUPLICATE_OPTIONS = "DuplicateOptions"
    INVALID_IDENTIFIER = "InvalidIdentifier"


class AuthError(ApiError):
    """Raised when the shared-secret header is missing or wrong."""
    status_code = 401
    error = "Unauthorized"

    MISSING_KEY = "MissingKey"
    INVALID_KEY = "InvalidKey"


class NotFoundError(ApiError):
    """Raised when no artifact exists for an identifier."""
    status_code = 404
    error = "File not found"

    def __init__(self, message: str = "The requested image file does not exist"):
        super().__init__(message, reason="NotFound")


class ConversionError(ApiError):
    """Raised when cwebp fails or can't be run."""
    status_code = 500
    error = "Conversion failed"

    TOOL_FAILED = "ToolFailed"
    TOOL_UNAVAILABLE = "ToolUnavailable"
    TOOL_TIMEOUT = "ToolTimeout"

    def __init__(self, message: str, reason: str, stderr: str | None = None):
        self.stderr = stderr
        super().__init__(message, reason=reason)
