"""
Container Format Constants
==========================

Fixed parameters of the family image container format.

The container has no version field, so every value below is part of the
interoperability contract: an independent decoder only works if it hardcodes
the same numbers. None of them are configurable.

Layout:
    SALT (16) | NONCE (12) | TAG (16) | CIPHERTEXT (N)
"""

from typing import Final

# Key Derivation
KEY_DERIVATION_FUNCTION: Final[str] = "PBKDF2-SHA256"
KDF_ITERATIONS: Final[int] = 100_000
SALT_LENGTH_BYTES: Final[int] = 16

# Encryption Settings
ENCRYPTION_ALGORITHM: Final[str] = "AES-256-GCM"
KEY_LENGTH_BYTES: Final[int] = 32  # 256 bits
IV_LENGTH_BYTES: Final[int] = 12  # 96 bits for GCM
TAG_LENGTH_BYTES: Final[int] = 16  # 128 bits

# Container layout offsets
SALT_OFFSET: Final[int] = 0
IV_OFFSET: Final[int] = SALT_OFFSET + SALT_LENGTH_BYTES
TAG_OFFSET: Final[int] = IV_OFFSET + IV_LENGTH_BYTES
CIPHERTEXT_OFFSET: Final[int] = TAG_OFFSET + TAG_LENGTH_BYTES
CONTAINER_HEADER_SIZE: Final[int] = CIPHERTEXT_OFFSET  # 44

# Files picked up by the batch pipelines (compared lower-cased)
IMAGE_EXTENSIONS: Final[tuple[str, ...]] = (
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".bmp",
    ".webp",
)
