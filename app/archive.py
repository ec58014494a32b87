"""
app/archive.py
-----------------------------------------------------------------------------
Zip export of the Project Directory.

The archive is built in memory (generated sites are a handful of small text
files) and handed to ``StreamingResponse`` by the download route.  Entries
are stored flat under their bare filenames so the zip extracts into a single
folder.
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

from app.errors import StorageError

# zlib level 9: smallest download, and the sites are tiny anyway.
_COMPRESS_LEVEL: int = 9


def create_zip_archive(directory: Path) -> bytes:
    """
    Bundle every regular file directly under ``directory`` into a zip.

    Subdirectories and anything that is not a regular file are skipped.

    Parameters
    ----------
    directory : The Project Directory to archive.

    Returns
    -------
    bytes : Raw zip file bytes.

    Raises
    ------
    StorageError : If ``directory`` is missing, is not a directory, or a
                   file cannot be read.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise StorageError(f"Project directory not found: {directory}")

    buffer = io.BytesIO()

    try:
        with zipfile.ZipFile(
            buffer,
            mode="w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=_COMPRESS_LEVEL,
        ) as zf:
            for child in sorted(directory.iterdir()):
                if child.is_file():
                    zf.write(child, arcname=child.name)
    except OSError as exc:
        raise StorageError(f"Failed to archive {directory}: {exc}") from exc

    return buffer.getvalue()
