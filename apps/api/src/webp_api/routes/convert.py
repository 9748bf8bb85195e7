"""Image conversion route."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from ..auth import require_api_key
from ..ingest import ingest
from ..responses import shape_response

logger = logging.getLogger(__name__)

convert_bp = Blueprint("convert", __name__, url_prefix="/api")


@convert_bp.post("/convert")
@require_api_key
def convert_image():
    """Convert an uploaded image to WebP and return a link or base64 payload."""
    config = current_app.config["webp_config"]
    conversion_service = current_app.config["conversion_service"]
    store = current_app.config["artifact_store"]

    upload, options = ingest(
        request.stream,
        request.headers.get("Content-Type"),
        config.max_image_bytes,
    )
    logger.debug("Conversion params: %s", options)

    artifact = conversion_service.convert(upload, options)

    return jsonify(shape_response(artifact, options, request.host_url, store))
