"""
Exceptions for SealBox
This is placed such that there is a general error catcher
"""

from __future__ import annotations

from pathlib import Path


class SealBoxError(Exception):
    # general container for errors
    pass


class RandomnessUnavailableError(SealBoxError):
    # raised when the OS CSPRNG cannot provide salt/nonce bytes
    pass


class InvalidContainerError(SealBoxError):
    # raised when input is too short to hold salt + nonce
    pass


class AuthenticationFailedError(SealBoxError):
    # raised on AEAD tag mismatch: wrong passphrase OR tampered data, never told apart
    def __init__(self, message: str = "authentication failed: wrong passphrase or corrupted data"):
        super().__init__(message)


class IOFailureError(SealBoxError):
    """Raised when reading or writing a file fails.

    Wraps the underlying :class:`OSError` so callers can tell file access
    problems apart from cryptographic failures. Only the path and the OS
    reason are kept.
    """

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")

    @classmethod
    def from_os_error(cls, path: str | Path, exc: OSError) -> "IOFailureError":
        return cls(path, exc.strerror or exc.__class__.__name__)


class UsageError(SealBoxError):
    # raised for caller mistakes: missing passphrase, missing file, bad output target
    pass
