"""
Key Derivation Functions
========================

Password-based key derivation for the container format.

Implements:
    - PBKDF2-HMAC-SHA256, 100,000 iterations, 32-byte output

The parameters are fixed format constants (see security.constants).
Each container carries its own salt, so two containers encrypted under
the same password use unrelated keys.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from familyvault.core.crypto.errors import InvalidArgument
from familyvault.security.constants import (
    KDF_ITERATIONS,
    KEY_LENGTH_BYTES,
    SALT_LENGTH_BYTES,
)


def normalize_password(password: str | bytes | bytearray) -> bytes:
    """
    Convert a password to the bytes fed into the KDF.

    Text passwords are UTF-8 encoded, matching what browser and Node
    decoders do with the same string.

    Raises:
        InvalidArgument: If the password is empty or of the wrong type
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    elif isinstance(password, (bytes, bytearray, memoryview)):
        password = bytes(password)
    else:
        raise InvalidArgument("Password must be str or bytes")

    if not password:
        raise InvalidArgument("Password cannot be empty")

    return password


def derive_key(password: str | bytes, salt: bytes) -> bytes:
    """
    Derive a container key from password and salt using PBKDF2-HMAC-SHA256.

    Pure and deterministic: the same (password, salt) always gives the
    same key. Nothing is cached or logged.

    Args:
        password: Operator password (non-empty)
        salt: Per-container salt, exactly 16 bytes

    Returns:
        32-byte key for AES-256-GCM

    Raises:
        InvalidArgument: If password is empty or salt has the wrong size
    """
    secret = normalize_password(password)

    if not isinstance(salt, (bytes, bytearray, memoryview)):
        raise InvalidArgument("Salt must be bytes")
    if len(salt) != SALT_LENGTH_BYTES:
        raise InvalidArgument(f"Salt must be exactly {SALT_LENGTH_BYTES} bytes")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH_BYTES,
        salt=bytes(salt),
        iterations=KDF_ITERATIONS,
    )
    return kdf.derive(secret)
