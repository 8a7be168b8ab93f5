"""Per-request ownership of ephemeral files.

A :class:`Workspace` is handed to every operation that needs the disk. It
names files uniquely, remembers every path it hands out or is told about, and
deletes all of them exactly once when the request is done.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import TYPE_CHECKING, List

from docshop.logging import get_logger
from docshop.models import UploadedFile

if TYPE_CHECKING:
    from werkzeug.datastructures import FileStorage

logger = get_logger(__name__)


class Workspace:
    """Scoped working-directory handle for a single request."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._paths: List[Path] = []

    def __enter__(self) -> Workspace:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup_all()

    @property
    def paths(self) -> List[Path]:
        return list(self._paths)

    def register(self, path: Path) -> Path:
        """Record *path* for deletion at cleanup time."""
        path = Path(path)
        if path not in self._paths:
            self._paths.append(path)
        return path

    def new_path(self, prefix: str, suffix: str = "") -> Path:
        """Return a fresh, registered path that no other request will use."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.register(self.root / f"{prefix}-{uuid.uuid4().hex}{suffix}")

    def save_upload(self, storage: FileStorage, prefix: str = "upload") -> UploadedFile:
        """Write a multipart upload to disk and describe it."""
        suffix = Path(storage.filename or "").suffix.lower()
        path = self.new_path(prefix, suffix)
        storage.save(str(path))
        return UploadedFile(
            original_name=storage.filename or path.name,
            mime_type=(storage.mimetype or "application/octet-stream").lower(),
            path=path,
            size_bytes=path.stat().st_size,
        )

    def cleanup_all(self) -> int:
        """Delete every registered file, logging failures instead of raising.

        Returns the number of files actually removed. Calling it again is a
        no-op because the registry is emptied first.
        """
        paths, self._paths = self._paths, []
        deleted = 0
        for path in paths:
            try:
                path.unlink()
                deleted += 1
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Failed to delete ephemeral file", path=str(path), error=str(exc))
        if deleted:
            logger.debug("Workspace cleaned up", deleted=deleted)
        return deleted

