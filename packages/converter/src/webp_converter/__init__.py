"""
WebP Conversion Engine.

This package is the core image-webp conversion logic.
It is used only by the API service.

Deployment:
    pip install cwebp-api
    apt install webp  # for cwebp command

This package has no networking dependencies. The pixel work is done by cwebp.

"""

from .convert import ConversionJob, OutputArtifact
from .cwebp import (
    CwebpError,
    CwebpTimeout,
    CwebpUnavailable,
    build_command,
    build_cwebp_args,
    convert_to_webp,
    run_cwebp,
)

__all__ = [
    "CwebpError",
    "CwebpTimeout",
    "CwebpUnavailable",
    "build_cwebp_args",
    "build_command",
    "run_cwebp",
    "convert_to_webp",
    "ConversionJob",
    "OutputArtifact",
]
