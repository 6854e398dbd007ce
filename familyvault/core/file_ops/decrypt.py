"""
Container Decryption Module
===========================

Decode-side helpers: single containers, data URLs, whole directories.

Security Properties:
- Integrity checked BEFORE any content returned
- Fail-closed design (any error = complete failure)
- Plaintext files are written atomically, never partially
"""

from __future__ import annotations

import base64
import mimetypes
from pathlib import Path
from typing import Final, Optional

from familyvault.core.crypto.container import ContainerCodec
from familyvault.core.crypto.errors import DecryptionError
from familyvault.core.file_ops.pipeline import BatchPipeline, BatchResult
from familyvault.utils.paths import atomic_write_bytes

DEFAULT_MIME_TYPE: Final[str] = "image/jpeg"

_codec = ContainerCodec()


def decrypt_file(path: Path | str, password: str | bytes) -> bytes:
    """
    Read a container from disk and decode it.

    Raises:
        OSError: If the file cannot be read
        MalformedContainer: If the file is too short to be a container
        AuthenticationFailed: If the password is wrong or the file was modified
    """
    return _codec.decode(Path(path).read_bytes(), password)


def decrypt_to_file(
    encrypted_path: Path | str,
    output_path: Path | str,
    password: str | bytes,
) -> int:
    """
    Decode a container and save the plaintext.

    Nothing is written unless the container authenticates.

    Returns:
        Number of plaintext bytes written
    """
    plaintext = decrypt_file(encrypted_path, password)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return atomic_write_bytes(output_path, plaintext)


def decrypt_to_data_url(
    container: bytes,
    password: str | bytes,
    mime_type: Optional[str] = None,
    filename: Optional[str] = None,
) -> str:
    """
    Decode a container into a ``data:`` URL for direct display.

    Args:
        container: Container bytes
        password: Password used at encode time
        mime_type: Explicit MIME type of the image
        filename: Used to guess the MIME type when none is given

    Returns:
        ``data:<mime>;base64,<payload>``

    Raises:
        DecryptionError: If decoding fails or yields no data
    """
    plaintext = _codec.decode(container, password)

    if not plaintext:
        raise DecryptionError("Decrypted data is empty")

    if mime_type is None and filename:
        mime_type, _ = mimetypes.guess_type(filename)

    payload = base64.b64encode(plaintext).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"


class DecryptPipeline(BatchPipeline):
    """
    Directory-to-directory container decoder.

    Same preconditions, allow-list and per-file isolation as BatchPipeline.
    A container that fails to authenticate is a per-file failure and
    produces no output file.
    """

    operation = "decrypt"
    progress_label = "Decrypting"

    __slots__ = ()

    def _transform(self, data: bytes, password: str | bytes) -> bytes:
        return self._codec.decode(data, password)


def decrypt_directory(
    source_dir: Path | str,
    output_dir: Path | str,
    password: str | bytes,
    workers: int = 1,
) -> BatchResult:
    """Convenience function to decrypt a directory of containers."""
    return DecryptPipeline(workers=workers).run(source_dir, output_dir, password)
