"""
FamilyVault - Password-Protected Image Containers
=================================================

Encrypts a directory of images into self-contained AES-256-GCM containers
(salt | nonce | tag | ciphertext) that can each be decrypted on their own
with the password.

Security Notice:
- No secrets are logged
- Fail-closed decoding
- Source files are never modified
"""

from familyvault.core.config import VaultConfig
from familyvault.core.crypto import ContainerCodec, decode, encode
from familyvault.core.file_ops import BatchPipeline, BatchResult
from familyvault.core.logging import get_secure_logger

__version__ = "0.1.0"

__all__ = [
    "VaultConfig",
    "ContainerCodec",
    "encode",
    "decode",
    "BatchPipeline",
    "BatchResult",
    "get_secure_logger",
    "__version__",
]
