"""
Streaming multipart ingestion for convert requests.

The body is fed to werkzeug's sans-IO MultipartDecoder in fixed-size
chunks. The "image" part is collected in memory and the read is aborted
as soon as it would grow past the ceiling. The whole body is capped at
the ceiling plus room for params and part headers, so padding before
the first boundary or after the last one cannot grow memory either.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import IO

from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.http import parse_options_header
from werkzeug.sansio.multipart import (
    Data,
    Epilogue,
    Field,
    File,
    MultipartDecoder,
    NeedData,
)

from webp_shared.options import ConversionOptions, OptionsError, parse_conversion_options

from .errors import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MAX_PARAMS_BYTES = 64 * 1024
HEADER_ALLOWANCE = 64 * 1024

IMAGE_FIELD = "image"
PARAMS_FIELD = "params"


@dataclass(frozen=True)
class UploadedImage:
    """Raw upload, owned by the request that received it."""
    filename: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _boundary(content_type: str | None) -> bytes:
    mimetype, params = parse_options_header(content_type or "")
    boundary = params.get("boundary")
    if mimetype != "multipart/form-data" or not boundary:
        raise ValidationError(
            "Request body must be multipart/form-data",
            ValidationError.MALFORMED_BODY,
        )
    return boundary.encode("latin-1")


def _chunks(stream: IO[bytes], size: int):
    while True:
        data = stream.read(size)
        if not data:
            break
        yield data
    yield None


def _parse_params(raw: bytes) -> ConversionOptions:
    try:
        document = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(
            f"Invalid params JSON: {e}", ValidationError.MALFORMED_OPTIONS
        ) from e
    try:
        return parse_conversion_options(document)
    except OptionsError as e:
        raise ValidationError(str(e), ValidationError.MALFORMED_OPTIONS) from e


def body_limit(max_bytes: int) -> int:
    """Largest body accepted for an image ceiling of max_bytes."""
    return max_bytes + MAX_PARAMS_BYTES + HEADER_ALLOWANCE


def _too_large(limit: int) -> ValidationError:
    logger.warning("Upload aborted: body exceeds %d bytes", limit)
    return ValidationError(
        f"Request body exceeds maximum size of {limit} bytes",
        ValidationError.SIZE_EXCEEDED,
    )


def ingest(
    stream: IO[bytes],
    content_type: str | None,
    max_bytes: int,
    chunk_size: int = CHUNK_SIZE,
) -> tuple[UploadedImage, ConversionOptions]:
    """
    Read a convert request body.

    Raises:
        ValidationError: For a missing/duplicate part, a missing filename,
            an oversize image, a malformed params document or body.
    """
    limit = body_limit(max_bytes)
    decoder = MultipartDecoder(_boundary(content_type), max_form_memory_size=limit)

    image: bytearray | None = None
    filename: str | None = None
    params: bytearray | None = None

    current: str | None = None
    seen_image = False
    received = 0

    try:
        for data in _chunks(stream, chunk_size):
            if data is not None:
                received += len(data)
                if received > limit:
                    raise _too_large(limit)
            decoder.receive_data(data)
            event = decoder.next_event()
            while not isinstance(event, (Epilogue, NeedData)):
                if isinstance(event, (Field, File)):
                    current = event.name
                    if current == IMAGE_FIELD:
                        if seen_image:
                            raise ValidationError(
                                "Only one image part is allowed",
                                ValidationError.DUPLICATE_IMAGE,
                            )
                        seen_image = True
                        if isinstance(event, File) and event.filename:
                            filename = event.filename
                        image = bytearray()
                    elif current == PARAMS_FIELD:
                        if params is not None:
                            raise ValidationError(
                                "Only one params part is allowed",
                                ValidationError.DUPLICATE_OPTIONS,
                            )
                        params = bytearray()
                elif isinstance(event, Data):
                    if current == IMAGE_FIELD and image is not None:
                        if len(image) + len(event.data) > max_bytes:
                            logger.warning(
                                "Upload aborted: image exceeds %d bytes", max_bytes
                            )
                            raise ValidationError(
                                f"Image size exceeds maximum limit of {max_bytes} bytes",
                                ValidationError.SIZE_EXCEEDED,
                            )
                        image += event.data
                    elif current == PARAMS_FIELD and params is not None:
                        if len(params) + len(event.data) > MAX_PARAMS_BYTES:
                            raise ValidationError(
                                f"params part exceeds {MAX_PARAMS_BYTES} bytes",
                                ValidationError.MALFORMED_OPTIONS,
                            )
                        params += event.data
                event = decoder.next_event()
    except RequestEntityTooLarge:
        raise _too_large(limit) from None
    except ValueError as e:
        raise ValidationError(
            f"Malformed multipart body: {e}", ValidationError.MALFORMED_BODY
        ) from e

    if image is None:
        raise ValidationError("No image file provided", ValidationError.MISSING_IMAGE)
    if not filename:
        raise ValidationError("No filename provided", ValidationError.MISSING_FILENAME)

    options = _parse_params(bytes(params)) if params is not None else ConversionOptions()

    logger.debug("Ingested %s (%d bytes) with %s", filename, len(image), options)
    return UploadedImage(filename=filename, data=bytes(image)), options
