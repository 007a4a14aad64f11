"""
File-level encrypt/decrypt on top of the in-memory container codec.

This is the I/O boundary of SealBox: it reads a whole file, hands the bytes to
``sealbox.security.crypto`` and writes the result next to the input.

Naming:
    encrypt: <file>      -> <file>.enc
    decrypt: <file>.enc  -> <file>
    decrypt: <file>      -> <file>.dec   (no .enc suffix; never overwrite input)

Outputs are written to a temporary file in the destination directory and then
moved into place, so a failed operation never leaves a partial output behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from sealbox.security import crypto
from .exceptions import IOFailureError, SealBoxError, UsageError

logger = logging.getLogger(__name__)

ENC_SUFFIX = ".enc"
DEC_SUFFIX = ".dec"
OUTPUT_MODE = 0o644

# Read once at import; os.umask can only be queried by setting it.
_UMASK = os.umask(0)
os.umask(_UMASK)

ENCRYPT = "encrypt"
DECRYPT = "decrypt"


@dataclass
class FileResult:
    """Outcome of one file in a batch run."""

    source: Path
    output: Optional[Path] = None
    error: Optional[SealBoxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def encrypted_path_for(path: str | Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + ENC_SUFFIX)


def decrypted_path_for(path: str | Path) -> Path:
    path = Path(path)
    if path.name.endswith(ENC_SUFFIX) and len(path.name) > len(ENC_SUFFIX):
        return path.with_name(path.name[: -len(ENC_SUFFIX)])
    return path.with_name(path.name + DEC_SUFFIX)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise IOFailureError.from_os_error(path, e) from e


def _check_output(src: Path, dest: Path, overwrite: bool) -> None:
    # Checked before any work is done, not at replace time: a file created at
    # dest in between is replaced even without overwrite.
    try:
        same = dest.resolve() == src.resolve()
        exists = dest.exists()
    except OSError as e:
        raise IOFailureError.from_os_error(dest, e) from e
    if same:
        raise UsageError(f"refusing to write output over its own input: {src}")
    if exists and not overwrite:
        raise UsageError(f"output file already exists: {dest} (use --force to overwrite)")


def _write_atomic(path: Path, data: bytes) -> None:
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise IOFailureError.from_os_error(path, e) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; give outputs the usual 0644 minus umask
        os.chmod(tmp_path, OUTPUT_MODE & ~_UMASK)
        os.replace(tmp_path, path)
    except OSError as e:
        raise IOFailureError.from_os_error(path, e) from e
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def encrypt_file(
    password: bytes | str,
    path: str | Path,
    output: Optional[str | Path] = None,
    overwrite: bool = False,
) -> Path:
    """Encrypt ``path`` into a container file and return the output path."""
    src = Path(path)
    dest = Path(output) if output is not None else encrypted_path_for(src)
    _check_output(src, dest, overwrite)

    plaintext = _read_bytes(src)
    container = crypto.seal(password, plaintext)
    _write_atomic(dest, container)

    logger.info("encrypted %s -> %s (%d bytes)", src, dest, len(container))
    return dest


def decrypt_file(
    password: bytes | str,
    path: str | Path,
    output: Optional[str | Path] = None,
    overwrite: bool = False,
) -> Path:
    """Decrypt container file ``path`` and return the path of the recovered file."""
    src = Path(path)
    dest = Path(output) if output is not None else decrypted_path_for(src)
    _check_output(src, dest, overwrite)

    data = _read_bytes(src)
    plaintext = crypto.open_container(password, data)
    _write_atomic(dest, plaintext)

    logger.info("decrypted %s -> %s (%d bytes)", src, dest, len(plaintext))
    return dest


_OPERATIONS: dict[str, Callable[..., Path]] = {
    ENCRYPT: encrypt_file,
    DECRYPT: decrypt_file,
}


def process_files(
    password: bytes | str,
    paths: Iterable[str | Path],
    operation: str,
    workers: int = 1,
    overwrite: bool = False,
) -> List[FileResult]:
    """
    Run ``operation`` ("encrypt" or "decrypt") over many files.

    Each file is independent: one failing file is recorded in its
    :class:`FileResult` and does not stop the others. Results come back in
    input order. With ``workers > 1`` files run on a thread pool.
    """
    try:
        func = _OPERATIONS[operation]
    except KeyError:
        raise UsageError(f"unknown operation: {operation}") from None
    if workers < 1:
        raise UsageError("workers must be at least 1")

    def _run(p: str | Path) -> FileResult:
        src = Path(p)
        try:
            return FileResult(source=src, output=func(password, src, overwrite=overwrite))
        except SealBoxError as e:
            logger.debug("%s failed for %s: %s", operation, src, e.__class__.__name__)
            return FileResult(source=src, error=e)

    paths = list(paths)
    if workers == 1 or len(paths) <= 1:
        return [_run(p) for p in paths]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_run, paths))
