"""Configuration management for the WebP API."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "dev"


def _getenv(name: str, legacy: str | None, default: str) -> str:
    """Read name, falling back to its legacy spelling, then default."""
    value = os.getenv(name)
    if value is None and legacy is not None:
        value = os.getenv(legacy)
    return default if value is None else value


def _env_int(name: str, default: int, minimum: int = 0, legacy: str | None = None) -> int:
    raw = _getenv(name, legacy, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Config:
    """API configuration loaded from environment variables."""

    host: str = "0.0.0.0"
    port: int = 3333
    output_dir: Path = Path("img_webp")
    retention_hours: int = 72
    max_image_mb: int = 100
    api_key: str = PLACEHOLDER_API_KEY
    cwebp_bin: str = "cwebp"
    cwebp_timeout: float = 0.0
    convert_workers: int = 4
    sweep_interval: float = 3600.0

    @classmethod
    def load(cls) -> Config:
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("WEBP_HOST", "0.0.0.0"),
            port=_env_int("WEBP_PORT", 3333, minimum=1),
            output_dir=Path(os.getenv("WEBP_OUTPUT_DIR", "img_webp")),
            retention_hours=_env_int("WEBP_RETENTION_HOURS", 72, legacy="DELTIME"),
            max_image_mb=_env_int("WEBP_MAX_IMAGE_MB", 100, minimum=1, legacy="IMGSIZE"),
            api_key=_getenv("WEBP_API_KEY", "X_API_KEY", PLACEHOLDER_API_KEY),
            cwebp_bin=os.getenv("WEBP_CWEBP_BIN", "cwebp"),
            cwebp_timeout=float(_env_int("WEBP_CWEBP_TIMEOUT", 0)),
            convert_workers=_env_int("WEBP_CONVERT_WORKERS", 4, minimum=1),
        )

    @property
    def max_image_bytes(self) -> int:
        return self.max_image_mb * 1024 * 1024

    @property
    def timeout(self) -> float | None:
        """cwebp timeout in seconds, None when disabled."""
        return self.cwebp_timeout if self.cwebp_timeout > 0 else None

    def ensure_directories(self) -> None:
        """Create the output directory. Existing artifacts are kept."""
        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created output directory: %s", self.output_dir)

    def log_summary(self) -> None:
        logger.info("Output directory: %s", self.output_dir.resolve())
        logger.info(
            "File deletion time: %d hours (0 means no deletion)", self.retention_hours
        )
        logger.info("Maximum image size: %d bytes", self.max_image_bytes)
        logger.info("Conversion workers: %d", self.convert_workers)
        if self.api_key == PLACEHOLDER_API_KEY:
            logger.warning(
                "WEBP_API_KEY is not set, using the placeholder key. "
                "Set it before exposing this service."
            )
