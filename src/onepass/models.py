"""Domain models and the plaintext record encoding for onepass.

The decrypted vault is a stream of fixed 4-line blocks::

    resource
    <name>
    <user>
    <password>

An empty vault is the empty string.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from .errors import MalformedRecordError

RECORD_MARKER = "resource"
NONCE_MARKER = "nonce"
RESERVED_TOKENS = frozenset({RECORD_MARKER, NONCE_MARKER})

LINES_PER_RECORD = 4


class ResourceField(str, Enum):
    """A field of a :class:`Resource` that can be updated in place."""

    NAME = "name"
    USER = "user"
    PASSWORD = "password"


class Resource(BaseModel):
    """A single stored credential."""

    name: str
    user: str = ""
    password: str = ""


def bootstrap_plaintext() -> str:
    """Return the plaintext of a vault holding no records."""
    return ""


def format_record(resource: Resource) -> str:
    return f"{RECORD_MARKER}\n{resource.name}\n{resource.user}\n{resource.password}\n"


def format_records(resources: Iterable[Resource]) -> str:
    return "".join(format_record(r) for r in resources)


def parse_records(plaintext: str) -> list[Resource]:
    """Parse the decrypted record stream into resources, in stream order."""
    lines = plaintext.split("\n")
    # A well-formed stream ends with a newline, leaving one empty tail item.
    if lines and lines[-1] == "":
        lines.pop()

    resources: list[Resource] = []
    for start in range(0, len(lines), LINES_PER_RECORD):
        if lines[start] != RECORD_MARKER:
            raise MalformedRecordError(
                f"Expected a record marker on line {start + 1}, found {lines[start]!r}."
            )
        block = lines[start + 1 : start + LINES_PER_RECORD]
        if len(block) < LINES_PER_RECORD - 1:
            raise MalformedRecordError(
                f"Truncated record at line {start + 1}: "
                f"expected {LINES_PER_RECORD - 1} lines after the marker, found {len(block)}."
            )
        name, user, password = block
        resources.append(Resource(name=name, user=user, password=password))
    return resources
