"""Health check route. No API key required."""

from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, jsonify

from .. import __version__

health_bp = Blueprint("health", __name__)

SERVICE_NAME = "cwebp-api"


@health_bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": __version__,
    })
