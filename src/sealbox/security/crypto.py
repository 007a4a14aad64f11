"""Password-based AEAD container codec.

Container layout (no magic, no version field):
- 16 bytes: salt (PBKDF2 input)
- 12 bytes: nonce (AES-GCM IV)
- rest:     ciphertext || 16-byte GCM tag

A fresh salt per container means a fresh key per container, so a
(key, nonce) pair is never reused even if two nonces collide.

Both the whole plaintext and the whole container are held in memory; there is
no streaming mode. Nothing here touches the filesystem and nothing here logs.
"""
from __future__ import annotations

import os
from typing import NamedTuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealbox.core.exceptions import (
    AuthenticationFailedError,
    InvalidContainerError,
    RandomnessUnavailableError,
)
from .kdf import SALT_SIZE, derive_key, generate_salt


NONCE_SIZE = 12
TAG_SIZE = 16
HEADER_SIZE = SALT_SIZE + NONCE_SIZE


class Container(NamedTuple):
    salt: bytes
    nonce: bytes
    ciphertext: bytes


def generate_nonce() -> bytes:
    try:
        return os.urandom(NONCE_SIZE)
    except (OSError, NotImplementedError) as e:
        raise RandomnessUnavailableError(f"secure random source unavailable: {e}") from e


def pack_container(salt: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be exactly {SALT_SIZE} bytes")
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"nonce must be exactly {NONCE_SIZE} bytes")
    return salt + nonce + ciphertext


def parse_container(data: bytes) -> Container:
    """Split raw container bytes into salt, nonce and ciphertext.

    Raises InvalidContainerError if ``data`` cannot even hold the header.
    Anything 28 bytes or longer is accepted here; whether it is genuine is only
    known once the tag is checked.
    """
    if len(data) < HEADER_SIZE:
        raise InvalidContainerError(
            f"invalid encrypted data: {len(data)} bytes, need at least {HEADER_SIZE}"
        )
    data = bytes(data)
    return Container(
        salt=data[:SALT_SIZE],
        nonce=data[SALT_SIZE:HEADER_SIZE],
        ciphertext=data[HEADER_SIZE:],
    )


def seal(password: bytes | str, plaintext: bytes) -> bytes:
    """Encrypt ``plaintext`` under ``password`` and return container bytes."""
    salt = generate_salt()
    nonce = generate_nonce()
    key = derive_key(password, salt)

    ct = AESGCM(key).encrypt(nonce, bytes(plaintext), None)
    return pack_container(salt, nonce, ct)


def open_container(password: bytes | str, data: bytes) -> bytes:
    """Decrypt container bytes produced by :func:`seal`.

    A wrong password and tampered data both raise AuthenticationFailedError
    with the same message.
    """
    container = parse_container(data)
    key = derive_key(password, container.salt)

    try:
        return AESGCM(key).decrypt(container.nonce, container.ciphertext, None)
    except InvalidTag:
        raise AuthenticationFailedError() from None


# Public API names
encrypt = seal
decrypt = open_container
