"""Response documents for a finished conversion."""

from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Any

from webp_converter import OutputArtifact
from webp_shared.options import ConversionOptions

from .store import ArtifactStore

IMAGES_PATH = "/api/images"
OUTPUT_FORMAT = "webp"
CONTENT_TYPE = "image/webp"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def image_url(identifier: str) -> str:
    return f"{IMAGES_PATH}/{identifier}"


def link_response(artifact: OutputArtifact, host_url: str) -> dict[str, Any]:
    url = image_url(artifact.identifier)
    return {
        "success": True,
        "response_type": "webp",
        "file_id": artifact.identifier,
        "filename": artifact.identifier,
        "url": url,
        "full_url": f"{host_url.rstrip('/')}{url}",
        "timestamp": _timestamp(),
    }


def embedded_response(artifact: OutputArtifact, store: ArtifactStore) -> dict[str, Any]:
    """The artifact is read back from the store and left in place."""
    data = store.read(artifact.identifier)
    return {
        "success": True,
        "response_type": "base64",
        "data": base64.b64encode(data).decode("ascii"),
        "format": OUTPUT_FORMAT,
        "filename": artifact.identifier,
        "timestamp": _timestamp(),
    }


def shape_response(
    artifact: OutputArtifact,
    options: ConversionOptions,
    host_url: str,
    store: ArtifactStore,
) -> dict[str, Any]:
    if options.is_embedded():
        return embedded_response(artifact, store)
    return link_response(artifact, host_url)
