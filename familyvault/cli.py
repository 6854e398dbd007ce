"""
Command Line Interface
======================

    familyvault encrypt <source-directory> <password> [-o OUTPUT] [-j N]
    familyvault decrypt <source-directory> <password> -o OUTPUT [-j N]

Exit status is 0 when a run completes, even if some files failed, 1 when a
precondition stops the run before any output is written, and 2 on usage
errors. Pass ``-`` as the password to be prompted for it instead.
"""

from __future__ import annotations

import argparse
import dataclasses
import getpass
import sys
from pathlib import Path
from typing import Optional, Sequence

from familyvault import __version__
from familyvault.core.config import VaultConfig
from familyvault.core.crypto.errors import EntropyUnavailable
from familyvault.core.file_ops.decrypt import DecryptPipeline
from familyvault.core.file_ops.pipeline import BatchPipeline, BatchResult
from familyvault.core.logging import get_secure_logger
from familyvault.utils.validators import ValidationError
from familyvault.security.constants import ENCRYPTION_ALGORITHM, KEY_DERIVATION_FUNCTION


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument("source", help="Directory holding the files to process.")
    shared.add_argument("password", help='Password ("-" to prompt).')
    shared.add_argument(
        "-j",
        "--workers",
        type=int,
        default=None,
        help="Number of files processed in parallel (default: 1).",
    )
    shared.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-file details.",
    )

    parser = argparse.ArgumentParser(
        prog="familyvault",
        description=(
            f"Encrypt image files into {ENCRYPTION_ALGORITHM} containers "
            f"with {KEY_DERIVATION_FUNCTION} key derivation."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            '  %(prog)s encrypt ./my-images "my-secret-password"\n'
            "  %(prog)s decrypt data/familyImages - -o ./restored\n"
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encrypt", parents=[shared], help="Encrypt a directory of images.")
    enc.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory (default: data/familyImages next to the package).",
    )

    dec = sub.add_parser("decrypt", parents=[shared], help="Decrypt a directory of containers.")
    dec.add_argument("-o", "--output", required=True, help="Directory for decrypted images.")

    return parser


def _report(result: BatchResult, command: str) -> None:
    past = "encrypted" if command == "encrypt" else "decrypted"

    print("")
    print(f"{command.capitalize()}ion complete!")
    print(f"  Successfully {past}: {result.succeeded_count} files")
    if result.failed_count:
        print(f"  Failed: {result.failed_count} files")
        for filename, reason in sorted(result.failures):
            print(f"    - {filename}: {reason}")
    print(f"  Output directory: {result.output_dir}")
    if command == "encrypt":
        print("")
        print("Note: The original files were not modified.")


def cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = VaultConfig.load()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    logging_config = config.logging
    if args.verbose:
        logging_config = dataclasses.replace(logging_config, level="DEBUG")
    get_secure_logger("familyvault", log_dir=config.paths.log_dir, config=logging_config)

    password = args.password
    if password == "-":
        password = getpass.getpass("Password: ")

    pipeline_cls = BatchPipeline if args.command == "encrypt" else DecryptPipeline
    try:
        pipeline = pipeline_cls.from_config(config, workers=args.workers)
    except ValueError as e:
        parser.error(str(e))

    output_dir = Path(args.output) if args.output else config.paths.output_dir

    try:
        result = pipeline.run(args.source, output_dir, password)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except EntropyUnavailable as e:
        print(f"Error: {e}; nothing further was written", file=sys.stderr)
        return 1

    _report(result, args.command)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        return cli(argv)
    except KeyboardInterrupt:
        print("Exiting...")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
