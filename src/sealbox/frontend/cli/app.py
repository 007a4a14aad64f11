"""
SealBox command line interface.

Usage:
    sealbox encrypt --password <password> <file> [<file> ...]
    sealbox decrypt --password <password> <file.enc> [<file.enc> ...]
    sealbox info

The password may also come from ``SEALBOX_PASSWORD`` or an interactive prompt.

Exit codes:
    0  success
    1  decryption failed (wrong password or corrupted data) / invalid container
    2  usage error
    3  file access error
    4  secure random source unavailable
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from sealbox import __version__
from sealbox.core import file_ops
from sealbox.core.exceptions import (
    AuthenticationFailedError,
    InvalidContainerError,
    IOFailureError,
    RandomnessUnavailableError,
    SealBoxError,
    UsageError,
)
from sealbox.security.crypto import HEADER_SIZE, NONCE_SIZE, TAG_SIZE
from sealbox.security.kdf import kdf_params_to_dict
from .context import build_context, resolve_log_level
from .logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CRYPTO = 1
EXIT_USAGE = 2
EXIT_IO = 3
EXIT_RANDOMNESS = 4


def exit_code_for(error: BaseException) -> int:
    if isinstance(error, (AuthenticationFailedError, InvalidContainerError)):
        return EXIT_CRYPTO
    if isinstance(error, UsageError):
        return EXIT_USAGE
    if isinstance(error, IOFailureError):
        return EXIT_IO
    if isinstance(error, RandomnessUnavailableError):
        return EXIT_RANDOMNESS
    return EXIT_CRYPTO


def _add_file_command(subparsers, name: str, help_text: str) -> None:
    p = subparsers.add_parser(name, help=help_text)
    p.add_argument("files", nargs="+", metavar="FILE", help="File(s) to process")
    p.add_argument(
        "-p",
        "--password",
        default=None,
        help="Password (default: $SEALBOX_PASSWORD or interactive prompt)",
    )
    p.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output path (only with a single FILE)",
    )
    p.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing output files",
    )
    p.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Number of files to process in parallel (default: $SEALBOX_WORKERS or 1)",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sealbox",
        description="Password-based file encryption (PBKDF2-SHA256 + AES-256-GCM).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More log output (-vv for debug)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True
    _add_file_command(subparsers, file_ops.ENCRYPT, "Encrypt file(s) to <file>.enc")
    _add_file_command(subparsers, file_ops.DECRYPT, "Decrypt <file>.enc back to <file>")
    subparsers.add_parser("info", help="Show container format and KDF parameters")
    return parser


def _print_info() -> None:
    params = kdf_params_to_dict()
    print("Container: salt || nonce || ciphertext || tag")
    print(f"  header: {HEADER_SIZE} bytes (salt {params['salt_len']}, nonce {NONCE_SIZE})")
    print(f"  tag:    {TAG_SIZE} bytes (AES-256-GCM)")
    print(f"KDF: {params['algo']}-{params['hash']}, {params['iterations']} iterations, "
          f"{params['key_len']}-byte key")


def _run_files(args: argparse.Namespace, log_level: int) -> int:
    if args.output is not None and len(args.files) != 1:
        raise UsageError("--output can only be used with a single file")

    ctx = build_context(
        password=args.password,
        workers=args.jobs,
        log_level=log_level,
        confirm=args.command == file_ops.ENCRYPT,
    )
    logger.debug("%s: %d file(s), %d worker(s)", args.command, len(args.files), ctx.workers)

    if args.output is not None:
        func = file_ops.encrypt_file if args.command == file_ops.ENCRYPT else file_ops.decrypt_file
        try:
            out = func(ctx.password, args.files[0], output=args.output, overwrite=args.force)
        except SealBoxError as e:
            results = [file_ops.FileResult(source=args.files[0], error=e)]
        else:
            results = [file_ops.FileResult(source=args.files[0], output=out)]
    else:
        results = file_ops.process_files(
            ctx.password,
            args.files,
            args.command,
            workers=ctx.workers,
            overwrite=args.force,
        )

    verb = "encrypted" if args.command == file_ops.ENCRYPT else "decrypted"
    code = EXIT_OK
    for result in results:
        if result.ok:
            print(f"File {verb} successfully: {result.output}")
        else:
            print(f"{args.command.capitalize()} failed for {result.source}: {result.error}",
                  file=sys.stderr)
            code = max(code, exit_code_for(result.error))
    return code


# Main entry point
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        log_level = resolve_log_level(args.verbose, args.quiet)
        configure_logging(log_level)

        if args.command == "info":
            _print_info()
            return EXIT_OK
        return _run_files(args, log_level)
    except SealBoxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return exit_code_for(e)
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
