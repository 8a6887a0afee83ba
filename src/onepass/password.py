"""Strong password suggestions."""

from __future__ import annotations

import secrets
import string

from . import config

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = "!@#$%^&*()-_=+[]{}|;:,.<>?"

_CLASSES = (UPPERCASE, LOWERCASE, DIGITS, SYMBOLS)
_ALL_CHARS = "".join(_CLASSES)


def suggest(length: int = config.SUGGESTED_PASSWORD_LENGTH) -> str:
    """Return a random password with at least one character of every class."""
    if length < len(_CLASSES):
        raise ValueError(f"Password length must be at least {len(_CLASSES)}.")

    chars = [secrets.choice(cls) for cls in _CLASSES]
    chars += [secrets.choice(_ALL_CHARS) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
