"""Small helper to build a SealBox run context for the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional
import getpass
import logging
import os
import sys

from sealbox.core.exceptions import UsageError
from .logging_config import level_from_name

PASSWORD_ENV = "SEALBOX_PASSWORD"
LOG_LEVEL_ENV = "SEALBOX_LOG_LEVEL"
WORKERS_ENV = "SEALBOX_WORKERS"


@dataclass
class CliContext:
    """Runtime settings a CLI command needs."""

    password: str = field(repr=False)
    log_level: int = logging.WARNING
    workers: int = 1


def _workers_from_env(env: Mapping[str, str]) -> int:
    raw = env.get(WORKERS_ENV)
    if not raw:
        return 1
    try:
        value = int(raw)
    except ValueError:
        raise UsageError(f"{WORKERS_ENV} must be an integer, got {raw!r}") from None
    if value < 1:
        raise UsageError(f"{WORKERS_ENV} must be at least 1")
    return value


def _prompt_password(prompt: Callable[[str], str], confirm: bool) -> str:
    password = prompt("Password: ")
    if confirm and prompt("Confirm password: ") != password:
        raise UsageError("passwords do not match")
    return password


def resolve_log_level(
    verbose: int = 0,
    quiet: bool = False,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    # Flags win over the environment.
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    env = os.environ if env is None else env
    return level_from_name(env.get(LOG_LEVEL_ENV))


def build_context(
    password: Optional[str] = None,
    workers: Optional[int] = None,
    log_level: int = logging.WARNING,
    confirm: bool = False,
    env: Optional[Mapping[str, str]] = None,
    prompt: Callable[[str], str] = getpass.getpass,
    interactive: Optional[bool] = None,
) -> CliContext:
    """
    Resolve the password and batch settings for one CLI invocation.

    Password sources, first match wins:

    - the ``--password`` flag
    - the ``SEALBOX_PASSWORD`` environment variable
    - an interactive ``getpass`` prompt when stdin is a terminal
      (asked twice when ``confirm`` is set, i.e. for encryption)

    An empty or missing password raises :class:`UsageError`.
    """
    env = os.environ if env is None else env
    if interactive is None:
        interactive = sys.stdin.isatty()

    if not password:
        password = env.get(PASSWORD_ENV)
    if not password and interactive:
        password = _prompt_password(prompt, confirm)
    if not password:
        raise UsageError("password is required")

    if workers is None:
        workers = _workers_from_env(env)
    elif workers < 1:
        raise UsageError("--jobs must be at least 1")

    return CliContext(password=password, log_level=log_level, workers=workers)
