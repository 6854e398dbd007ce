"""
Batch Encryption Pipeline
=========================

Encrypts every image file in a source directory into a container of the
same name in an output directory.

Guarantees:
- Preconditions (source directory, password, at least one eligible file)
  are checked before the output directory is created
- Each file is read, encoded and written independently; a failure on one
  file is recorded and the batch moves on
- Source files are never modified
- Containers are written atomically (temp file + rename) by default

Per-file failures never cross the batch boundary. The one exception is
EntropyUnavailable: without fresh randomness nothing can be encoded
safely, so the whole run stops.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from familyvault.core.config import VaultConfig
from familyvault.core.crypto.container import ContainerCodec
from familyvault.core.crypto.errors import EntropyUnavailable
from familyvault.utils.paths import atomic_write_bytes, list_eligible_files
from familyvault.utils.validators import (
    NoEligibleFiles,
    PathError,
    validate_password,
    validate_source_directory,
)
from familyvault.security.constants import IMAGE_EXTENSIONS


@dataclass(frozen=True, slots=True)
class FileOutcome:
    """
    Result of processing one file.

    Exactly one of ``bytes_written`` (success) or ``error`` (failure)
    is meaningful.
    """

    filename: str
    bytes_written: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """
    Aggregate of one pipeline run.

    Owned by the caller; nothing here is persisted.
    """

    source_dir: Path
    output_dir: Path
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of files attempted."""
        return len(self.outcomes)

    @property
    def succeeded(self) -> list[str]:
        return [o.filename for o in self.outcomes if o.ok]

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failures(self) -> list[tuple[str, str]]:
        """(filename, reason) for every failed file."""
        return [(o.filename, o.error) for o in self.outcomes if not o.ok]

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    def __repr__(self) -> str:
        return (
            f"BatchResult(total={self.total}, succeeded={self.succeeded_count}, "
            f"failed={self.failed_count})"
        )


class BatchPipeline:
    """
    Directory-to-directory container encoder.

    Usage:
        pipeline = BatchPipeline()
        result = pipeline.run(Path("my-images"), Path("data/familyImages"), "secret")
        for filename, reason in result.failures:
            ...

    With ``workers > 1`` files are processed on a thread pool. Each file's
    read, encode and write still happen together on one worker, and outcomes
    are collected on the calling thread, so counts are exact regardless of
    completion order.
    """

    operation = "encrypt"
    progress_label = "Encrypting"

    __slots__ = ("_codec", "_workers", "_atomic_writes", "_log")

    def __init__(
        self,
        workers: int = 1,
        atomic_writes: bool = True,
        codec: Optional[ContainerCodec] = None,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")

        self._codec = codec or ContainerCodec()
        self._workers = workers
        self._atomic_writes = atomic_writes
        self._log = logging.getLogger(f"familyvault.{self.operation}")

    @classmethod
    def from_config(cls, config: VaultConfig, workers: Optional[int] = None) -> "BatchPipeline":
        """
        Build a pipeline from the pipeline section of a VaultConfig.

        ``workers`` overrides the configured worker count when given.
        """
        return cls(
            workers=workers if workers is not None else config.pipeline.workers,
            atomic_writes=config.pipeline.atomic_writes,
        )

    def prepare(self, source_dir: Path | str, output_dir: Path | str, password: str | bytes) -> tuple[Path, Path, list[str]]:
        """
        Check every precondition of a run without touching the output directory.

        Returns:
            (resolved source, resolved output, eligible filenames)

        Raises:
            PathError: Source missing/not a directory, or output == source
            ValidationError: Empty password
            NoEligibleFiles: No file in source carries an image extension
        """
        source = validate_source_directory(source_dir)
        validate_password(password)

        output = Path(output_dir).expanduser().resolve()
        if output == source:
            raise PathError("Output directory must differ from the input directory")

        try:
            files = list_eligible_files(source)
        except OSError as e:
            raise PathError(f'Cannot list "{source_dir}": {e.strerror or e}') from e

        if not files:
            raise NoEligibleFiles(
                f'No image files found in "{source_dir}". '
                f"Supported formats: {', '.join(IMAGE_EXTENSIONS)}"
            )

        return source, output, files

    def run(self, source_dir: Path | str, output_dir: Path | str, password: str | bytes) -> BatchResult:
        """
        Process every eligible file in ``source_dir`` into ``output_dir``.

        Args:
            source_dir: Directory holding the input files
            output_dir: Directory for results (created if absent)
            password: Non-empty password

        Returns:
            BatchResult with one FileOutcome per eligible file

        Raises:
            PathError, ValidationError, NoEligibleFiles: Before any output exists
            EntropyUnavailable: If the random source fails mid-run
        """
        source, output, files = self.prepare(source_dir, output_dir, password)

        output.mkdir(parents=True, exist_ok=True)

        self._log.info("Found %d image files to %s", len(files), self.operation)
        result = BatchResult(source_dir=source, output_dir=output)

        if self._workers == 1:
            for filename in files:
                result.outcomes.append(self._process_file(source, output, filename, password))
            return result

        pool = ThreadPoolExecutor(max_workers=self._workers)
        try:
            futures = [
                pool.submit(self._process_file, source, output, filename, password)
                for filename in files
            ]
            for future in as_completed(futures):
                result.outcomes.append(future.result())
        except EntropyUnavailable:
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        else:
            pool.shutdown(wait=True)

        return result

    def _process_file(self, source: Path, output: Path, filename: str, password: str | bytes) -> FileOutcome:
        """Read, transform and write one file, reporting rather than raising."""
        self._log.info("%s: %s", self.progress_label, filename)

        try:
            data = self._read_file(source / filename)
            processed = self._transform(data, password)
            written = self._write_file(output / filename, processed)
        except EntropyUnavailable:
            raise
        except Exception as e:
            reason = str(e) or e.__class__.__name__
            self._log.error("Error processing %s: %s", filename, reason)
            return FileOutcome(filename=filename, error=reason)

        self._log.debug("Wrote %d bytes to %s", written, output / filename)
        return FileOutcome(filename=filename, bytes_written=written)

    def _transform(self, data: bytes, password: str | bytes) -> bytes:
        return self._codec.encode(data, password)

    @staticmethod
    def _read_file(path: Path) -> bytes:
        with open(path, "rb") as handle:
            return handle.read()

    def _write_file(self, path: Path, data: bytes) -> int:
        if self._atomic_writes:
            return atomic_write_bytes(path, data)
        path.write_bytes(data)
        return len(data)


def encrypt_directory(
    source_dir: Path | str,
    output_dir: Path | str,
    password: str | bytes,
    workers: int = 1,
) -> BatchResult:
    """
    Convenience function to encrypt a directory of images.

    Returns:
        BatchResult of the run
    """
    return BatchPipeline(workers=workers).run(source_dir, output_dir, password)
