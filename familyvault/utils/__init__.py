"""
Utils module - Utility functions and helpers.
"""

from familyvault.utils.paths import (
    atomic_write_bytes,
    default_output_dir,
    has_image_extension,
    list_eligible_files,
)
from familyvault.utils.validators import (
    NoEligibleFiles,
    PathError,
    ValidationError,
    validate_password,
    validate_source_directory,
)

__all__ = [
    "atomic_write_bytes",
    "default_output_dir",
    "has_image_extension",
    "list_eligible_files",
    "NoEligibleFiles",
    "PathError",
    "ValidationError",
    "validate_password",
    "validate_source_directory",
]
