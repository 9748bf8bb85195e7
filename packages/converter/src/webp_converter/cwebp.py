"""
Wrapper for the cwebp command-line tool.

This module provides a Python interface to cwebp with:
- Deterministic argument derivation from ConversionOptions
- Custom exceptions for a failed run, a missing binary and a timeout
- Captured stderr on failure
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from webp_shared.options import ConversionOptions

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "cwebp"


class CwebpError(RuntimeError):
    """Raised when cwebp fails to convert an image."""

    def __init__(self, command: list[str], returncode: int, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"cwebp failed (rc={returncode}): {stderr.strip()}")


class CwebpUnavailable(RuntimeError):
    """Raised when the cwebp process can't be started at all."""

    def __init__(self, binary: str, reason: str):
        self.binary = binary
        self.reason = reason
        super().__init__(f"cwebp could not be started ({binary}): {reason}")


class CwebpTimeout(RuntimeError):
    """Raised when cwebp runs longer than the configured timeout."""

    def __init__(self, command: list[str], timeout: float):
        self.command = command
        self.timeout = timeout
        super().__init__(f"cwebp timed out after {timeout}s")


def build_cwebp_args(options: ConversionOptions) -> list[str]:
    """
    Option arguments for one cwebp run, without binary or file paths.

    -preset goes first because cwebp applies it before the other flags.
    """
    args: list[str] = []
    if options.preset is not None:
        args += ["-preset", options.preset]
    if options.lossless:
        args.append("-lossless")
    args += [
        "-q", str(options.quality),
        "-near_lossless", str(options.near_lossless),
        "-z", str(options.compression_level),
        "-m", str(options.method),
    ]
    return args


def build_command(
    input_path: Path,
    output_path: Path,
    options: ConversionOptions,
    binary: str = DEFAULT_BINARY,
) -> list[str]:
    return [binary, *build_cwebp_args(options), str(input_path), "-o", str(output_path)]


def run_cwebp(args: list[str], timeout: float | None = None) -> tuple[int, str, str]:
    """Run cwebp with the given arguments."""
    try:
        result = subprocess.run(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr
    except subprocess.TimeoutExpired as e:
        raise CwebpTimeout(args, timeout or 0.0) from e
    except (FileNotFoundError, PermissionError) as e:
        raise CwebpUnavailable(args[0], e.strerror or str(e)) from e


def convert_to_webp(
    input_path: Path,
    output_path: Path,
    options: ConversionOptions,
    binary: str = DEFAULT_BINARY,
    timeout: float | None = None,
) -> None:
    """
    Convert an image to WebP. No retries.

    Raises:
        CwebpError: If cwebp exits non-zero
        CwebpUnavailable: If cwebp can't be spawned
        CwebpTimeout: If a timeout is set and exceeded
        FileNotFoundError: If input file doesn't exist
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    cmd = build_command(input_path, output_path, options, binary)

    logger.debug("Running: %s", " ".join(cmd))
    returncode, _stdout, stderr = run_cwebp(cmd, timeout)

    if returncode != 0:
        raise CwebpError(cmd, returncode, stderr)
