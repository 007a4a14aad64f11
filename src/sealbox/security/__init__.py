"""Security helpers: KDF and AEAD container primitives for SealBox.

This package provides:
- PBKDF2-HMAC-SHA256 key derivation with a fixed work factor
- AES-256-GCM sealing/opening of ``salt || nonce || ciphertext`` containers

Everything here operates on byte buffers only; file access lives in
``sealbox.core.file_ops``.
"""

from .kdf import generate_salt, derive_key, kdf_params_to_dict, PBKDF2_ITERATIONS
from .crypto import (
    Container,
    HEADER_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    generate_nonce,
    pack_container,
    parse_container,
    seal,
    open_container,
    encrypt,
    decrypt,
)

__all__ = [
    "generate_salt",
    "derive_key",
    "kdf_params_to_dict",
    "PBKDF2_ITERATIONS",
    "Container",
    "HEADER_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "generate_nonce",
    "pack_container",
    "parse_container",
    "seal",
    "open_container",
    "encrypt",
    "decrypt",
]
