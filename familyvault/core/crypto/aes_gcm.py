"""
AES-256-GCM Authenticated Encryption
====================================

Thin wrapper over ``cryptography``'s AESGCM with the tag kept separate
from the ciphertext, since the container stores it ahead of the data.

Security Properties:
    - 256-bit key
    - 96-bit nonce (NIST recommended)
    - 128-bit authentication tag
    - No associated data

WARNING:
    - Never reuse (key, nonce) pairs
    - Always verify tag before using plaintext
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from familyvault.core.crypto.errors import (
    AuthenticationFailed,
    EntropyUnavailable,
    InvalidArgument,
)
from familyvault.security.constants import (
    IV_LENGTH_BYTES,
    KEY_LENGTH_BYTES,
    SALT_LENGTH_BYTES,
    TAG_LENGTH_BYTES,
)


def secure_random_bytes(length: int) -> bytes:
    """
    Read ``length`` bytes from the OS CSPRNG.

    ``secrets`` draws from ``os.urandom``, which is safe to call from
    several threads at once.

    Raises:
        EntropyUnavailable: If the random source fails
    """
    try:
        return secrets.token_bytes(length)
    except (OSError, NotImplementedError) as e:
        raise EntropyUnavailable("Secure random source unavailable") from e


def generate_salt() -> bytes:
    """Generate a fresh 16-byte KDF salt."""
    return secure_random_bytes(SALT_LENGTH_BYTES)


def generate_nonce() -> bytes:
    """
    Generate a fresh 12-byte GCM nonce.

    Every container also gets a fresh key (new salt), so random nonces
    never repeat under one key in practice.
    """
    return secure_random_bytes(IV_LENGTH_BYTES)


@dataclass(frozen=True, slots=True)
class SealedData:
    """
    Ciphertext and tag produced by one encryption.

    Attributes:
        ciphertext: Encrypted data, same length as the plaintext
        tag: 16-byte GCM authentication tag
    """

    ciphertext: bytes
    tag: bytes

    def __repr__(self) -> str:
        return f"SealedData(ciphertext_len={len(self.ciphertext)})"


class AesGcmCipher:
    """
    AES-256-GCM with detached tag.

    Usage:
        cipher = AesGcmCipher()
        sealed = cipher.encrypt(plaintext, key, nonce)
        plaintext = cipher.decrypt(sealed.ciphertext, sealed.tag, key, nonce)
    """

    __slots__ = ()

    @staticmethod
    def _check_key_nonce(key: bytes, nonce: bytes) -> None:
        if len(key) != KEY_LENGTH_BYTES:
            raise InvalidArgument(f"Key must be exactly {KEY_LENGTH_BYTES} bytes")
        if len(nonce) != IV_LENGTH_BYTES:
            raise InvalidArgument(f"Nonce must be exactly {IV_LENGTH_BYTES} bytes")

    def encrypt(self, plaintext: bytes, key: bytes, nonce: bytes) -> SealedData:
        """
        Encrypt plaintext using AES-256-GCM.

        Args:
            plaintext: Data to encrypt (can be empty)
            key: 32-byte key
            nonce: 12-byte nonce, never reused with this key

        Returns:
            SealedData with ciphertext and detached tag
        """
        self._check_key_nonce(key, nonce)

        # AESGCM appends the tag to the ciphertext
        combined = AESGCM(key).encrypt(nonce, bytes(plaintext), None)

        return SealedData(
            ciphertext=combined[:-TAG_LENGTH_BYTES],
            tag=combined[-TAG_LENGTH_BYTES:],
        )

    def decrypt(self, ciphertext: bytes, tag: bytes, key: bytes, nonce: bytes) -> bytes:
        """
        Decrypt ciphertext using AES-256-GCM with integrity verification.

        The tag is verified before any plaintext is returned.

        Raises:
            InvalidArgument: If key, nonce or tag have the wrong size
            AuthenticationFailed: If the tag does not verify
        """
        self._check_key_nonce(key, nonce)
        if len(tag) != TAG_LENGTH_BYTES:
            raise InvalidArgument(f"Tag must be exactly {TAG_LENGTH_BYTES} bytes")

        try:
            return AESGCM(key).decrypt(nonce, bytes(ciphertext) + bytes(tag), None)
        except InvalidTag as e:
            raise AuthenticationFailed("Container authentication failed") from e

