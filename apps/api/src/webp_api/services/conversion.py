"""
Conversion dispatch for the WebP API.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from webp_converter import (
    ConversionJob,
    CwebpError,
    CwebpTimeout,
    CwebpUnavailable,
    OutputArtifact,
)
from webp_shared.options import ConversionOptions

from ..config import Config
from ..errors import ConversionError
from ..ingest import UploadedImage

logger = logging.getLogger(__name__)


class ConversionService:
    """
    Runs cwebp jobs on a bounded pool, separate from the request threads.

    A request thread blocks on its job's future, so at most
    convert_workers cwebp processes run at once and the rest queue.
    """
    def __init__(self, config: Config):
        self._config = config
        self.output_dir = config.output_dir
        self._executor = ThreadPoolExecutor(
            max_workers=config.convert_workers,
            thread_name_prefix="cwebp",
        )
        logger.info("ConversionService started with %d workers", config.convert_workers)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def convert(self, upload: UploadedImage, options: ConversionOptions) -> OutputArtifact:
        """Convert an upload and wait for the result."""
        job = ConversionJob(
            upload.data,
            upload.filename,
            self.output_dir,
            options=options,
            binary=self._config.cwebp_bin,
            timeout=self._config.timeout,
        )
        future = self._executor.submit(self._run_job, job)
        return future.result()

    def _run_job(self, job: ConversionJob) -> OutputArtifact:
        logger.info(
            "Converting image: %s with response_type: %s",
            job.filename, job.options.response_type,
        )
        try:
            return job.run()
        except CwebpUnavailable as e:
            logger.error("cwebp unavailable: %s", e)
            raise ConversionError(
                "cwebp not found. Install webp package.",
                ConversionError.TOOL_UNAVAILABLE,
            ) from e
        except CwebpTimeout as e:
            logger.error("Conversion of %s timed out after %ss", job.filename, e.timeout)
            raise ConversionError(
                f"Conversion timed out after {e.timeout}s",
                ConversionError.TOOL_TIMEOUT,
            ) from e
        except CwebpError as e:
            logger.warning("Conversion of %s failed: %s", job.filename, e)
            raise ConversionError(
                f"Conversion failed: {e.stderr.strip() or f'exit code {e.returncode}'}",
                ConversionError.TOOL_FAILED,
                stderr=e.stderr,
            ) from e
