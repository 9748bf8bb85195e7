"""
The artifact store: a flat directory of converted .webp files.

There is no index and no locking. The conversion path writes files, the
images route and the base64 response path read them, and the retention
sweep deletes them, all concurrently. Readers open the file before doing
anything else and then read from the handle, so a file unlinked by the
sweep mid-read still reads completely on POSIX. A sweep that wins the
race before the open shows up as NotFoundError.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from webp_shared.files import is_bare_filename, is_in_dir

from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ArtifactStore:
    """Read/list/prune access to the output directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, identifier: str) -> Path:
        """Path of an artifact. Rejects anything but a bare filename."""
        if not is_bare_filename(identifier):
            raise ValidationError(
                f"Invalid image identifier: {identifier!r}",
                ValidationError.INVALID_IDENTIFIER,
            )
        path = self.root / identifier
        if not is_in_dir(self.root, path):
            raise ValidationError(
                f"Invalid image identifier: {identifier!r}",
                ValidationError.INVALID_IDENTIFIER,
            )
        return path

    def read(self, identifier: str) -> bytes:
        path = self.path_for(identifier)
        logger.debug("Requesting image: %s, path: %s", identifier, path)
        try:
            with open(path, "rb") as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError() from None

    def list_files(self) -> list[Path]:
        """Regular files directly inside the store, no recursion."""
        with os.scandir(self.root) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if entry.is_file(follow_symlinks=False)
            ]

    def purge_older_than(self, cutoff: float) -> int:
        """
        Delete files whose mtime is strictly before cutoff (epoch seconds).

        Per-file failures are logged and skipped. Returns the number of
        files deleted.
        """
        try:
            files = self.list_files()
        except OSError as e:
            logger.error("Cleanup scan of %s failed: %s", self.root, e)
            return 0

        deleted = 0
        for path in files:
            try:
                if path.stat().st_mtime >= cutoff:
                    continue
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Failed to delete expired file %s: %s", path, e)
                continue
            logger.debug("Deleted expired file: %s", path)
            deleted += 1
        return deleted

    def purge_older_than_hours(self, hours: int, now: float | None = None) -> int:
        now = time.time() if now is None else now
        return self.purge_older_than(now - hours * 3600)
