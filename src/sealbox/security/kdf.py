from __future__ import annotations

import os
from typing import Dict

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from sealbox.core.exceptions import RandomnessUnavailableError

# These values are part of the container format: they are not stored in the
# file, so changing any of them makes existing containers undecryptable.
SALT_SIZE = 16
KEY_SIZE = 32  # AES-256
PBKDF2_ITERATIONS = 100_000


def generate_salt(length: int = SALT_SIZE) -> bytes:
    """Return a cryptographically secure random salt."""
    try:
        return os.urandom(length)
    except (OSError, NotImplementedError) as e:
        raise RandomnessUnavailableError(f"secure random source unavailable: {e}") from e


def derive_key(password: bytes | str, salt: bytes) -> bytes:
    """
    Derive the 32-byte container key from a password using PBKDF2-HMAC-SHA256.
    Deterministic for a given (password, salt) pair.

    str passwords are UTF-8 encoded with surrogateescape, so a password that
    came in as undecodable argv or environment bytes maps back to those bytes.
    """
    if isinstance(password, str):
        password = password.encode("utf-8", "surrogateescape")
    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be exactly {SALT_SIZE} bytes")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(password)


def kdf_params_to_dict() -> Dict:
    return {
        "algo": "pbkdf2",
        "hash": "sha256",
        "iterations": PBKDF2_ITERATIONS,
        "key_len": KEY_SIZE,
        "salt_len": SALT_SIZE,
    }
