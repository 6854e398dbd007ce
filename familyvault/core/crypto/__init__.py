"""
FamilyVault Cryptographic Core
==============================

Password-based authenticated encryption for image containers.

Architecture:
    1. PBKDF2-HMAC-SHA256: password + salt -> 256-bit key
    2. AES-256-GCM: authenticated encryption, detached tag
    3. Container codec: salt | nonce | tag | ciphertext

Security Properties:
    - All encryption is authenticated (AEAD)
    - Keys are derived per container and never stored
    - Secure RNG for all salts and nonces
    - Decode fails closed on any tamper or wrong password
"""

from familyvault.core.crypto.aes_gcm import AesGcmCipher
from familyvault.core.crypto.container import Container, ContainerCodec, decode, encode
from familyvault.core.crypto.errors import (
    AuthenticationFailed,
    CryptoError,
    DecryptionError,
    EntropyUnavailable,
    InvalidArgument,
    MalformedContainer,
)
from familyvault.core.crypto.kdf import derive_key

__all__ = [
    "AesGcmCipher",
    "Container",
    "ContainerCodec",
    "encode",
    "decode",
    "derive_key",
    "CryptoError",
    "InvalidArgument",
    "EntropyUnavailable",
    "DecryptionError",
    "MalformedContainer",
    "AuthenticationFailed",
]
