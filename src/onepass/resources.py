"""Credential CRUD over the decrypted record stream.

Every operation decrypts the whole vault, works on the parsed records and,
when it changes anything, re-encrypts the whole stream under a freshly drawn
nonce before rewriting the file. Records are located by linear scan.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import ContextManager, Optional

from . import crypto
from .errors import (
    InvalidInputError,
    MalformedRecordError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from .guard import OperationGuard
from .models import (
    Resource,
    ResourceField,
    bootstrap_plaintext,
    format_records,
    parse_records,
)
from .store import VaultFile
from .validation import validate_field_value, validate_master_password, validate_resource_name

logger = logging.getLogger(__name__)


class ResourceStore:
    """Get, list, create, update and delete credentials in one vault file."""

    def __init__(self, vault: VaultFile, guard: Optional[OperationGuard] = None) -> None:
        self.vault = vault
        self.guard = guard

    @classmethod
    def at(cls, path: Path, guard: Optional[OperationGuard] = None) -> "ResourceStore":
        return cls(VaultFile(path), guard)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def initialize(self, password: str) -> Path:
        """Create a new vault holding no records, protected by *password*."""
        validate_master_password(password)
        with self._operation():
            path = self.vault.init()
            self._write(password, bootstrap_plaintext())
        return path

    def list(self, password: str) -> list[str]:
        """Return every resource name in stream order."""
        return [r.name for r in self._load(password)]

    def count(self, password: str) -> int:
        return len(self._load(password))

    def get(self, password: str, name: str) -> Resource:
        resources = self._load(password)
        return resources[_index_of(resources, name)]

    def create(self, password: str, resource: Resource) -> Resource:
        """Append *resource*; its name is trimmed and must be unused."""
        validate_master_password(password)
        record = Resource(
            name=validate_resource_name(resource.name),
            user=validate_field_value(resource.user, "user").strip(),
            password=validate_field_value(resource.password, "password"),
        )

        with self._operation():
            resources = self._load(password)
            if any(r.name.strip() == record.name for r in resources):
                raise ResourceExistsError(f"A resource named '{record.name}' already exists.")
            resources.append(record)
            self._save(password, resources)

        logger.debug("Created resource (now %d records)", len(resources))
        return record

    def update(self, password: str, name: str, field: ResourceField | str, value: str) -> Resource:
        """Replace one field of the resource called *name* and return the result."""
        validate_master_password(password)
        try:
            field = ResourceField(field)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown resource field '{field}'.") from exc
        if field is ResourceField.NAME:
            value = validate_resource_name(value)
        elif field is ResourceField.USER:
            value = validate_field_value(value, "user").strip()
        else:
            value = validate_field_value(value, "password")

        with self._operation():
            resources = self._load(password)
            index = _index_of(resources, name)
            if field is ResourceField.NAME and any(
                r.name == value for i, r in enumerate(resources) if i != index
            ):
                raise ResourceExistsError(f"A resource named '{value}' already exists.")
            updated = resources[index].model_copy(update={field.value: value})
            resources[index] = updated
            self._save(password, resources)

        logger.debug("Updated %s of record %d", field.value, index)
        return updated

    def delete(self, password: str, name: str) -> Resource:
        """Remove the resource called *name* and return it."""
        validate_master_password(password)
        with self._operation():
            resources = self._load(password)
            removed = resources.pop(_index_of(resources, name))
            self._save(password, resources)

        logger.debug("Deleted a record (now %d records)", len(resources))
        return removed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _operation(self) -> ContextManager[None]:
        return self.guard.operation() if self.guard is not None else nullcontext()

    def _load(self, password: str) -> list[Resource]:
        validate_master_password(password)
        nonce, ciphertext = self.vault.read()
        key = crypto.derive_key(password)
        plaintext = crypto.decrypt(key, nonce, ciphertext)
        try:
            text = plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedRecordError("Vault contents are not valid UTF-8.") from exc
        return parse_records(text)

    def _save(self, password: str, resources: list[Resource]) -> None:
        self._write(password, format_records(resources))

    def _write(self, password: str, plaintext: str) -> None:
        key = crypto.derive_key(password)
        nonce = crypto.generate_nonce()
        ciphertext = crypto.encrypt(key, nonce, plaintext.encode("utf-8"))
        self.vault.rewrite(nonce, ciphertext)


def _index_of(resources: list[Resource], name: str) -> int:
    for index, resource in enumerate(resources):
        if resource.name == name:
            return index
    raise ResourceNotFoundError(f"No resource named '{name}'.")
