"""
Container Codec
===============

Encodes plaintext + password into a self-contained container and back.

Container Format:
    SALT       16 bytes   PBKDF2 salt, fresh per container
    NONCE      12 bytes   GCM nonce, fresh per container
    TAG        16 bytes   GCM authentication tag
    CIPHERTEXT  N bytes   same length as the plaintext

    len(container) == 44 + len(plaintext)

Decoding fails closed: the first 44 bytes are never treated as ciphertext,
inputs shorter than that are rejected before any key derivation, and no
plaintext is released unless the tag verifies.
"""

from __future__ import annotations

from dataclasses import dataclass

from familyvault.core.crypto.aes_gcm import (
    AesGcmCipher,
    generate_nonce,
    generate_salt,
)
from familyvault.core.crypto.errors import MalformedContainer
from familyvault.core.crypto.kdf import derive_key, normalize_password
from familyvault.security.constants import (
    CIPHERTEXT_OFFSET,
    CONTAINER_HEADER_SIZE,
    IV_OFFSET,
    SALT_OFFSET,
    TAG_OFFSET,
)


@dataclass(frozen=True, slots=True)
class Container:
    """
    Parsed container fields.

    Salt, nonce and tag are public; only the password is secret.
    """

    salt: bytes
    nonce: bytes
    tag: bytes
    ciphertext: bytes

    def to_bytes(self) -> bytes:
        """Serialize as salt | nonce | tag | ciphertext."""
        return self.salt + self.nonce + self.tag + self.ciphertext

    @classmethod
    def from_bytes(cls, data: bytes) -> "Container":
        """
        Split raw container bytes into fields.

        Raises:
            MalformedContainer: If data is shorter than the fixed header
        """
        data = bytes(data)
        if len(data) < CONTAINER_HEADER_SIZE:
            raise MalformedContainer("Data too short for container")

        return cls(
            salt=data[SALT_OFFSET:IV_OFFSET],
            nonce=data[IV_OFFSET:TAG_OFFSET],
            tag=data[TAG_OFFSET:CIPHERTEXT_OFFSET],
            ciphertext=data[CIPHERTEXT_OFFSET:],
        )

    def __len__(self) -> int:
        return CONTAINER_HEADER_SIZE + len(self.ciphertext)

    def __repr__(self) -> str:
        return f"Container(ciphertext_len={len(self.ciphertext)})"


class ContainerCodec:
    """
    Password-based container encoder/decoder.

    Usage:
        codec = ContainerCodec()
        blob = codec.encode(image_bytes, "password")
        image_bytes = codec.decode(blob, "password")

    Security Notes:
        - Each encode draws a new salt and nonce, so the same input
          never produces the same container twice
        - The derived key only lives for the duration of one call
    """

    __slots__ = ("_cipher",)

    def __init__(self) -> None:
        self._cipher = AesGcmCipher()

    def encode(self, plaintext: bytes, password: str | bytes) -> bytes:
        """
        Encrypt plaintext into a container.

        Args:
            plaintext: Data to encrypt (can be empty)
            password: Non-empty password

        Returns:
            Container bytes, 44 bytes longer than the plaintext

        Raises:
            InvalidArgument: If the password is empty
            EntropyUnavailable: If the random source fails
        """
        secret = normalize_password(password)

        salt = generate_salt()
        nonce = generate_nonce()
        key = derive_key(secret, salt)

        sealed = self._cipher.encrypt(plaintext, key, nonce)

        return Container(
            salt=salt,
            nonce=nonce,
            tag=sealed.tag,
            ciphertext=sealed.ciphertext,
        ).to_bytes()

    def decode(self, container: bytes, password: str | bytes) -> bytes:
        """
        Decrypt a container, verifying integrity first.

        Args:
            container: Container bytes
            password: Password used at encode time

        Returns:
            The original plaintext

        Raises:
            MalformedContainer: If the input is shorter than 44 bytes
            AuthenticationFailed: If the tag does not verify (wrong password
                or any modification to the container)
            InvalidArgument: If the password is empty
        """
        parsed = Container.from_bytes(container)
        key = derive_key(password, parsed.salt)

        return self._cipher.decrypt(parsed.ciphertext, parsed.tag, key, parsed.nonce)


_default_codec = ContainerCodec()


def encode(plaintext: bytes, password: str | bytes) -> bytes:
    """Convenience function: encode with the shared codec."""
    return _default_codec.encode(plaintext, password)


def decode(container: bytes, password: str | bytes) -> bytes:
    """Convenience function: decode with the shared codec."""
    return _default_codec.decode(container, password)
