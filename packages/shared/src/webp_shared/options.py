"""
Conversion options for the cwebp pipeline.

Options Document (the "params" part of a convert request):
    {
        "lossless": false,
        "quality": 80,
        "near_lossless": 100,
        "compression_level": 6,
        "preset": null,
        "method": 4,
        "response_type": "webp"    # or "base64"
    }
Every key is optional.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Literal, Any

# Type literal
ResponseType = Literal["webp", "base64"]

PRESETS: frozenset[str] = frozenset(
    {"default", "photo", "picture", "drawing", "icon", "text"}
)

# (min, max) accepted by cwebp for each integer option
INT_RANGES: dict[str, tuple[int, int]] = {
    "quality": (0, 100),
    "near_lossless": (0, 100),
    "compression_level": (0, 9),
    "method": (0, 6),
}


class OptionsError(ValueError):
    """Raised when an options document can't be turned into ConversionOptions."""
    pass


@dataclass(frozen=True)
class ConversionOptions:
    """
    Parameters for a single cwebp run plus the requested response shape.
    """
    lossless: bool = False
    quality: int = 80
    near_lossless: int = 100
    compression_level: int = 6
    preset: str | None = None
    method: int = 4

    response_type: ResponseType = "webp"

    def is_embedded(self) -> bool:
        """True if the caller wants the image inline as base64."""
        return self.response_type == "base64"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def normalize_response_type(value: Any) -> ResponseType:
    """Case-insensitive match; anything unrecognized means a link response."""
    if isinstance(value, str) and value.strip().lower() == "base64":
        return "base64"
    return "webp"


def _int_option(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    # bool is an int subclass, "quality": true is not a quality
    if isinstance(value, bool) or not isinstance(value, int):
        raise OptionsError(f"'{key}' must be an integer, got {value!r}")
    low, high = INT_RANGES[key]
    if not low <= value <= high:
        raise OptionsError(f"'{key}' must be between {low} and {high}, got {value}")
    return value


def parse_conversion_options(data: dict[str, Any] | None) -> ConversionOptions:
    if data is None:
        return ConversionOptions()
    if not isinstance(data, dict):
        raise OptionsError("Options document must be a JSON object")

    lossless = data.get("lossless", False)
    if not isinstance(lossless, bool):
        raise OptionsError(f"'lossless' must be a boolean, got {lossless!r}")

    preset = data.get("preset")
    if preset is not None:
        if not isinstance(preset, str) or preset.lower() not in PRESETS:
            raise OptionsError(
                f"'preset' must be one of {', '.join(sorted(PRESETS))}, got {preset!r}"
            )
        preset = preset.lower()

    return ConversionOptions(
        lossless=lossless,
        quality=_int_option(data, "quality", 80),
        near_lossless=_int_option(data, "near_lossless", 100),
        compression_level=_int_option(data, "compression_level", 6),
        preset=preset,
        method=_int_option(data, "method", 4),
        response_type=normalize_response_type(data.get("response_type", "webp")),
    )
