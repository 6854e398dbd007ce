"""
FamilyVault File Operations Module
==================================

Batch encryption of image directories and the matching decode helpers.

Components:
- pipeline.py: BatchPipeline, per-file isolated directory encryption
- decrypt.py: container decoding to bytes, files, data URLs, directories
"""

from familyvault.core.file_ops.pipeline import (
    BatchPipeline,
    BatchResult,
    FileOutcome,
    encrypt_directory,
)
from familyvault.core.file_ops.decrypt import (
    DecryptPipeline,
    decrypt_directory,
    decrypt_file,
    decrypt_to_data_url,
    decrypt_to_file,
)

__all__ = [
    "BatchPipeline",
    "BatchResult",
    "FileOutcome",
    "encrypt_directory",
    "DecryptPipeline",
    "decrypt_directory",
    "decrypt_file",
    "decrypt_to_data_url",
    "decrypt_to_file",
]
