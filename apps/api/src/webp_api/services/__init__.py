"""Background and blocking-work services for the API."""

from .conversion import ConversionService
from .retention import RetentionSweeper

__all__ = ["ConversionService", "RetentionSweeper"]
