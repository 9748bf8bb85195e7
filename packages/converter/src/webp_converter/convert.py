"""
Image conversion orchestration for WebP output.

This module handles one conversion end to end:
1. Write the uploaded bytes to a scoped temporary file
2. Run cwebp with arguments derived from the ConversionOptions
3. Describe the produced artifact in the output directory
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from webp_shared.files import output_name_for
from webp_shared.options import ConversionOptions

from .cwebp import DEFAULT_BINARY, convert_to_webp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputArtifact:
    """A converted file in the output directory."""
    identifier: str
    path: Path
    created_at: datetime

    @classmethod
    def from_path(cls, path: Path) -> "OutputArtifact":
        mtime = path.stat().st_mtime
        return cls(
            identifier=path.name,
            path=path,
            created_at=datetime.fromtimestamp(mtime, tz=timezone.utc),
        )


class ConversionJob:
    """
    Converts a single uploaded image to WebP.

    The input only ever exists as a temporary file for the duration of
    run(); the output lands in output_dir as "<base name>.webp" and
    replaces any earlier artifact with the same name.
    """

    def __init__(
        self,
        image_bytes: bytes,
        filename: str,
        output_dir: Path,
        options: ConversionOptions | None = None,
        binary: str = DEFAULT_BINARY,
        timeout: float | None = None,
    ):
        if not filename:
            raise ValueError("filename is required")

        self.image_bytes = image_bytes
        self.filename = filename
        self.output_dir = Path(output_dir)
        self.options: ConversionOptions = options or ConversionOptions()
        self.binary = binary
        self.timeout = timeout

        self.output_path = self.output_dir / output_name_for(filename)

    def run(self) -> OutputArtifact:
        """Execute the conversion job."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        suffix = Path(self.filename).suffix.lower()
        if not suffix[1:].isalnum():
            suffix = ""

        with tempfile.TemporaryDirectory(prefix="webp-") as tmp:
            input_file = Path(tmp) / f"input{suffix}"
            input_file.write_bytes(self.image_bytes)
            logger.debug(
                "Wrote %d bytes of %s to %s",
                len(self.image_bytes), self.filename, input_file,
            )
            convert_to_webp(
                input_file,
                self.output_path,
                self.options,
                binary=self.binary,
                timeout=self.timeout,
            )

        artifact = OutputArtifact.from_path(self.output_path)
        logger.info("Conversion complete: %s -> %s", self.filename, artifact.identifier)
        return artifact
