"""
WebP API - Flask service around cwebp

This app is deployed on the conversion server. It:
1. Accepts image uploads and converts them with cwebp
2. Returns a download link or the WebP inline as base64
3. Serves converted images and deletes them after a retention period

Deployment:
    pip install cwebp-api
    apt install webp  # for cwebp command
    webp-api --port 3333
    # or: flask --app webp_api.app:create_app run
"""

__version__ = "1.0.0"

from .app import create_app
from .config import Config

__all__ = ["create_app", "Config", "__version__"]
