"""
Validation Utilities
====================

Precondition checks for the batch pipelines and command line.

Everything here runs before any output is created, so a failure leaves
the filesystem untouched.
"""

from __future__ import annotations

from pathlib import Path


class ValidationError(ValueError):
    """Raised when validation fails."""
    pass


class PathError(ValidationError):
    """Raised when the source directory is missing or not a directory."""
    pass


class NoEligibleFiles(ValidationError):
    """Raised when a source directory holds no files with an image extension."""
    pass


def validate_source_directory(path: str | Path) -> Path:
    """
    Validate that a source path exists and is a directory.

    Args:
        path: The directory to validate

    Returns:
        Resolved Path object

    Raises:
        PathError: If the path is missing or not a directory
    """
    try:
        source = Path(path).expanduser().resolve()
    except (ValueError, RuntimeError, OSError) as e:
        raise PathError(f"Invalid path: {e}") from e

    if not source.exists():
        raise PathError(f'Input directory "{path}" does not exist')

    if not source.is_dir():
        raise PathError(f'"{path}" is not a directory')

    return source


def validate_password(password: str | bytes | bytearray | memoryview | None) -> str | bytes | bytearray | memoryview:
    """
    Validate an operator password.

    The value is returned as given; encoding happens in the KDF.

    Raises:
        ValidationError: If the password is missing or empty
    """
    if password is None:
        raise ValidationError("Password cannot be empty")

    if not isinstance(password, (str, bytes, bytearray, memoryview)):
        raise ValidationError("Password must be str or bytes")

    if len(password) < 1:
        raise ValidationError("Password cannot be empty")

    return password
