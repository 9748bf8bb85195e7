"""
Shared option and filename types for WebP conversion

The package is a dependency of both the converter and the API:
- API uses it to parse the options document of a convert request
- Converter uses it to derive cwebp arguments and output names

Deployment:
    pip install cwebp-api
"""

from .options import (
    INT_RANGES,
    PRESETS,
    ConversionOptions,
    OptionsError,
    ResponseType,
    normalize_response_type,
    parse_conversion_options,
)
from .files import (
    OUTPUT_EXT,
    base_name,
    is_bare_filename,
    is_in_dir,
    output_name_for,
)

__all__ = [
    # Options
    "INT_RANGES",
    "PRESETS",
    "ConversionOptions",
    "OptionsError",
    "ResponseType",
    "normalize_response_type",
    "parse_conversion_options",
    # Files
    "OUTPUT_EXT",
    "base_name",
    "is_bare_filename",
    "is_in_dir",
    "output_name_for",
]
