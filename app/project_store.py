"""
app/project_store.py
-----------------------------------------------------------------------------
The single shared Project Directory, wrapped as an explicit resource handle.

Route handlers run in FastAPI's thread pool, so two generation requests can
finish at the same moment.  ``ProjectStore`` holds one lock across the whole
replace cycle and across archive construction: generations serialise, and a
download always sees one complete file set.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path

from app.archive import create_zip_archive
from app.errors import StorageError
from app.project_writer import write_project

logger = logging.getLogger(__name__)


class ProjectStore:
    """Lock-guarded access to one on-disk Project Directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def ensure_exists(self) -> None:
        """Create the directory if it is missing (the preview mount needs it)."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create {self.directory}: {exc}") from exc

    def replace(self, files: Mapping[str, str]) -> list[str]:
        """Replace the current file set; see :func:`app.project_writer.write_project`."""
        with self._lock:
            return write_project(self.directory, files)

    def archive(self) -> bytes:
        """Zip a consistent snapshot of the current file set."""
        with self._lock:
            return create_zip_archive(self.directory)

    def list_files(self) -> list[str]:
        """Sorted names of the files currently in the directory."""
        with self._lock:
            if not self.directory.is_dir():
                return []
            return sorted(p.name for p in self.directory.iterdir() if p.is_file())
