"""SealBox: password-based file encryption with authenticated containers."""

from sealbox.security.crypto import encrypt, decrypt
from sealbox.core.exceptions import (
    SealBoxError,
    RandomnessUnavailableError,
    InvalidContainerError,
    AuthenticationFailedError,
    IOFailureError,
    UsageError,
)

__version__ = "0.1.0"

__all__ = [
    "encrypt",
    "decrypt",
    "SealBoxError",
    "RandomnessUnavailableError",
    "InvalidContainerError",
    "AuthenticationFailedError",
    "IOFailureError",
    "UsageError",
    "__version__",
]
