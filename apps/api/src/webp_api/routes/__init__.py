"""API HTTP routes."""

from .convert import convert_bp
from .health import health_bp
from .images import images_bp

__all__ = ["convert_bp", "health_bp", "images_bp"]
