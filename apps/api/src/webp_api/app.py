"""Flask application factory for the WebP API."""

from __future__ import annotations

import logging
import sys

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import ApiError
from .routes import convert_bp, health_bp, images_bp
from .services import ConversionService, RetentionSweeper
from .store import ArtifactStore

logger = logging.getLogger(__name__)


def _handle_api_error(e: ApiError):
    return jsonify(e.to_dict()), e.status_code


def _handle_http_exception(e: HTTPException):
    return jsonify({
        "success": False,
        "error": e.name,
        "message": e.description,
    }), e.code


def _handle_os_error(e: OSError):
    logger.exception("Unhandled I/O error")
    return jsonify({
        "success": False,
        "error": "Internal Server Error",
        "message": "An internal error occurred",
    }), 500


def register_error_handlers(app: Flask) -> None:
    """Render every error as {success, error, message}."""
    app.register_error_handler(ApiError, _handle_api_error)
    app.register_error_handler(HTTPException, _handle_http_exception)
    app.register_error_handler(OSError, _handle_os_error)


def create_app(config: Config | None = None) -> Flask:
    """Create and configure the Flask application."""
    if config is None:
        config = Config.load()

    config.ensure_directories()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    store = ArtifactStore(config.output_dir.resolve())
    sweeper = RetentionSweeper(store, config.retention_hours, interval=config.sweep_interval)

    app.config["webp_config"] = config
    app.config["artifact_store"] = store
    app.config["conversion_service"] = ConversionService(config)
    app.config["retention_sweeper"] = sweeper

    app.register_blueprint(health_bp)
    app.register_blueprint(convert_bp)
    app.register_blueprint(images_bp)
    register_error_handlers(app)

    sweeper.start()

    config.log_summary()
    logger.info("WebP API initialized")
    return app


def main() -> None:
    """Entry point for running the development server."""
    config = Config.load()
    app = create_app(config)
    app.run(host=config.host, port=config.port, threaded=True, use_reloader=False)


if __name__ == "__main__":
    main()
