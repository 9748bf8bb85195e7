"""
Filename helpers shared by the converter and the API.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import Path

logger = logging.getLogger(__name__)

OUTPUT_EXT = ".webp"
FALLBACK_BASE_NAME = "image"

_SEPARATORS = re.compile(r"[/\\]")


def is_in_dir(base: Path, target: Path) -> bool:
    """Check if target path is in base dir."""
    try:
        target.resolve().relative_to(base.resolve())
        return True
    except ValueError:
        return False


def _is_control(c: str) -> bool:
    return unicodedata.category(c) == "Cc"


def base_name(filename: str) -> str:
    """
    Base name used for the output artifact.

    "cat.png" -> "cat", "holiday.photo.jpg" -> "holiday", "猫.png" -> "猫".
    Directory parts and control characters are dropped first; any other
    character, non-ASCII included, is kept.
    """
    last = _SEPARATORS.split(filename or "")[-1]
    stem = "".join(c for c in last.split(".", 1)[0] if not _is_control(c)).strip()
    if not is_bare_filename(stem):
        logger.debug("No usable base name in %r, using %s", filename, FALLBACK_BASE_NAME)
        return FALLBACK_BASE_NAME
    return stem


def output_name_for(filename: str) -> str:
    """Artifact identifier for an uploaded filename."""
    return f"{base_name(filename)}{OUTPUT_EXT}"


def is_bare_filename(name: str) -> bool:
    """True if name can't address anything outside a single directory."""
    if not name or name in (".", ".."):
        return False
    if any(c in name for c in ("/", "\\")):
        return False
    return not any(_is_control(c) for c in name)
