"""CLI for the WebP API."""

from __future__ import annotations

import dataclasses
import logging
import sys

import click

from .app import create_app
from .config import Config


@click.command()
@click.option("-h", "--host", default=None, help="Bind host (default: WEBP_HOST or 0.0.0.0)")
@click.option("-p", "--port", default=None, type=int, help="Bind port (default: WEBP_PORT or 3333)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def cli(host: str | None, port: int | None, verbose: bool) -> None:
    """Run the cwebp conversion API."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    config = Config.load()
    overrides = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if overrides:
        config = dataclasses.replace(config, **overrides)

    app = create_app(config)
    logging.info("Server starting on %s:%d", config.host, config.port)
    try:
        app.run(host=config.host, port=config.port, threaded=True, use_reloader=False)
    except KeyboardInterrupt:
        logging.info("Interrupted")
    finally:
        app.config["retention_sweeper"].stop()
        app.config["conversion_service"].shutdown(wait=False)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
