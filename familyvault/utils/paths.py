"""
Path Utilities
==============

Output locations, extension filtering and atomic writes.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Final

from familyvault.security.constants import IMAGE_EXTENSIONS


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once at import; os.umask cannot be queried without setting it
_UMASK: Final[int] = _read_umask()


def default_output_dir() -> Path:
    """
    Get the default directory encrypted containers are written to.

    Anchored to the working directory, so running the tool from the
    project checkout fills ``data/familyImages`` there. Use ``-o`` or
    FAMILYVAULT_PATHS__OUTPUT_DIR to write elsewhere.

    Returns:
        ``<cwd>/data/familyImages``
    """
    return Path.cwd().resolve() / "data" / "familyImages"


def has_image_extension(filename: str) -> bool:
    """Check a filename against the image allow-list (case-insensitive)."""
    return os.path.splitext(filename)[1].lower() in IMAGE_EXTENSIONS


def list_eligible_files(directory: Path) -> list[str]:
    """
    List entry names in ``directory`` that carry an image extension.

    Only the name is checked. Entries that turn out to be unreadable
    are left for the per-file step to report.

    Returns:
        Sorted list of filenames (not paths)
    """
    return sorted(
        name for name in os.listdir(directory)
        if has_image_extension(name)
    )


def atomic_write_bytes(path: Path, data: bytes) -> int:
    """
    Write ``data`` to ``path`` so readers never see a partial file.

    The bytes go to a temporary file in the same directory, are flushed
    to disk, and then moved over the target with ``os.replace``. The
    result gets the same permissions a plain write would: the existing
    target's mode if there is one, else 0666 minus the process umask.

    Returns:
        Number of bytes written
    """
    path = Path(path)
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = 0o666 & ~_UMASK

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=path.parent,
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

    return len(data)
