"""
Security module - format constants shared by encoder and decoder.
"""

from familyvault.security.constants import (
    CONTAINER_HEADER_SIZE,
    IMAGE_EXTENSIONS,
    IV_LENGTH_BYTES,
    KDF_ITERATIONS,
    KEY_LENGTH_BYTES,
    SALT_LENGTH_BYTES,
    TAG_LENGTH_BYTES,
)

__all__ = [
    "CONTAINER_HEADER_SIZE",
    "IMAGE_EXTENSIONS",
    "IV_LENGTH_BYTES",
    "KDF_ITERATIONS",
    "KEY_LENGTH_BYTES",
    "SALT_LENGTH_BYTES",
    "TAG_LENGTH_BYTES",
]
