"""Shared-secret access control for /api routes."""

from __future__ import annotations

import hmac
import logging
from functools import wraps

from flask import current_app, request

from .errors import AuthError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


def check_api_key(provided: str | None, expected: str) -> None:
    """Raise AuthError unless provided matches expected."""
    if provided is None:
        raise AuthError("API Key is required", AuthError.MISSING_KEY)
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthError("Invalid API Key", AuthError.INVALID_KEY)


def require_api_key(view):
    """Decorator to require the X-API-Key header before the view runs."""
    @wraps(view)
    def decorated(*args, **kwargs):
        config = current_app.config["webp_config"]
        try:
            check_api_key(request.headers.get(API_KEY_HEADER), config.api_key)
        except AuthError as e:
            logger.warning("Rejected %s %s: %s", request.method, request.path, e.reason)
            raise
        return view(*args, **kwargs)
    return decorated
