"""Input checks shared by the resource store and the command line."""

from __future__ import annotations

from .errors import InvalidInputError
from .models import RESERVED_TOKENS


def validate_master_password(password: str) -> str:
    """Return *password* unchanged if it can be used as a master password."""
    if not password or not password.strip():
        raise InvalidInputError("Master password cannot be empty.")
    if " " in password:
        raise InvalidInputError("Master password cannot contain spaces.")
    return password


def validate_field_value(value: str, field: str = "value") -> str:
    """Reject values that would break the line-oriented record stream."""
    if "\n" in value or "\r" in value:
        raise InvalidInputError(f"Resource {field} cannot contain line breaks.")
    return value


def validate_resource_name(name: str) -> str:
    """Return the trimmed resource *name*, or raise :class:`InvalidInputError`."""
    validate_field_value(name, "name")
    trimmed = name.strip()
    if not trimmed:
        raise InvalidInputError("Resource name cannot be empty.")
    if trimmed in RESERVED_TOKENS:
        raise InvalidInputError(f"'{trimmed}' is a reserved keyword and cannot be used as a resource name.")
    return trimmed
