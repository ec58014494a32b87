"""
app/project_writer.py
-----------------------------------------------------------------------------
Persist a Generated File Set as the Project Directory.

The directory is always replaced wholesale: files from an earlier generation
never survive into the next one.  Files are written into a sibling staging
directory first, and only once every file is on disk is the old directory
removed and the staging directory renamed into place.  A failure part-way
through leaves the previous project untouched.

Filenames are re-checked here even though ``app.main`` already partitions
them, so no caller can write outside ``directory`` by accident.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Mapping
from pathlib import Path

from app.errors import StorageError
from app.extractor import is_safe_filename

logger = logging.getLogger(__name__)


def write_project(directory: Path, files: Mapping[str, str]) -> list[str]:
    """
    Replace ``directory`` with exactly the files in ``files``.

    Parameters
    ----------
    directory : Target Project Directory.  Its parent must exist or be
                creatable.
    files     : Flat filename -> text content mapping.  May be empty, in
                which case the directory is recreated empty.

    Returns
    -------
    list[str] : Sorted names of the files written.

    Raises
    ------
    StorageError : If a filename is unsafe (checked before any disk access)
                   or any filesystem operation fails.
    """
    unsafe = sorted(name for name in files if not is_safe_filename(name))
    if unsafe:
        raise StorageError(f"Refusing to write unsafe filenames: {unsafe}")

    directory = Path(directory)
    try:
        directory.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(
            tempfile.mkdtemp(prefix=f".{directory.name}-staging-", dir=directory.parent)
        )
    except OSError as exc:
        raise StorageError(f"Cannot prepare staging area next to {directory}: {exc}") from exc

    try:
        # mkdtemp creates 0700; the project is served to the browser.
        staging.chmod(0o755)
        for name, content in files.items():
            (staging / name).write_text(content, encoding="utf-8")

        if directory.exists():
            shutil.rmtree(directory)
        staging.rename(directory)
    except (OSError, UnicodeError) as exc:
        # UnicodeError: model text with a lone surrogate cannot be encoded.
        shutil.rmtree(staging, ignore_errors=True)
        raise StorageError(f"Failed to write project files to {directory}: {exc}") from exc
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    written = sorted(files)
    logger.info("Wrote %d file(s) to %s", len(written), directory)
    return written
