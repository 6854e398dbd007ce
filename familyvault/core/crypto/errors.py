"""
Crypto Error Types
==================

Exceptions raised by key derivation and the container codec.

Decode failures share the ``DecryptionError`` base and carry generic
messages: callers learn that a container was rejected, never which part of
it was wrong.
"""


class CryptoError(Exception):
    """Base class for all cryptographic failures."""
    pass


class InvalidArgument(CryptoError, ValueError):
    """Raised when a crypto operation receives an unusable input."""
    pass


class EntropyUnavailable(CryptoError):
    """
    Raised when the OS random source fails.

    Encoding cannot continue safely without fresh salt and nonce,
    so this is always fatal.
    """
    pass


class DecryptionError(CryptoError):
    """
    Raised when a container cannot be decoded.

    Doesn't reveal the cause (to prevent information leakage).
    """
    pass


class MalformedContainer(DecryptionError):
    """Raised when the input is structurally not a container."""
    pass


class AuthenticationFailed(DecryptionError):
    """
    Raised when tag verification fails.

    Wrong password, corrupted ciphertext and corrupted header
    all look the same from here.
    """
    pass
