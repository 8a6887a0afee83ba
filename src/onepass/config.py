"""Paths and tunables for onepass."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

DEFAULT_DIR_NAME = ".onepass"
DEFAULT_FILE_NAME = "main.txt"

VAULT_ENV = "ONEPASS_VAULT"
PASSWORD_ENV = "ONEPASS_MASTER_PASSWORD"

# Interrupt guard: how long a signal waits for an in-flight rewrite.
INTERRUPT_POLL_INTERVAL = 1.0
INTERRUPT_MAX_POLLS = 5

SUGGESTED_PASSWORD_LENGTH = 14


def default_vault_path() -> Path:
    return Path.home() / DEFAULT_DIR_NAME / DEFAULT_FILE_NAME


def resolve_vault_path(custom: Optional[str | Path] = None) -> Path:
    """Return the vault path: *custom* > ``$ONEPASS_VAULT`` > the default.

    Relative overrides are taken relative to the home directory.
    """
    chosen = custom or os.environ.get(VAULT_ENV)
    if not chosen:
        return default_vault_path()
    path = Path(chosen).expanduser()
    if not path.is_absolute():
        path = Path.home() / path
    return path
