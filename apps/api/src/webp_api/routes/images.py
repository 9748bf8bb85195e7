"""Converted image serving route."""

from __future__ import annotations

import io
import logging

from flask import Blueprint, current_app, send_file

from ..auth import require_api_key
from ..responses import CONTENT_TYPE

logger = logging.getLogger(__name__)

images_bp = Blueprint("images", __name__, url_prefix="/api")


# path: so identifiers containing "/" reach the store and get a 400
# instead of falling through to the router's 404
@images_bp.get("/images/<path:identifier>")
@require_api_key
def get_image(identifier: str):
    """Serve a converted WebP file."""
    store = current_app.config["artifact_store"]

    content = store.read(identifier)

    return send_file(
        io.BytesIO(content),
        mimetype=CONTENT_TYPE,
        as_attachment=False,
        download_name=identifier,
    )
