"""Encrypted vault file I/O.

Binary file format
------------------
Offset  Length  Content
0       12      Nonce (fresh random value on every write)
12      …       ChaCha20-Poly1305 ciphertext + 16-byte tag of the record stream

There is no magic, version header or length prefix; the AEAD tag is the only
integrity check.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .crypto import NONCE_SIZE, TAG_SIZE
from .errors import (
    AlreadyInitializedError,
    CorruptVaultError,
    NotInitializedError,
    StorageError,
)

logger = logging.getLogger(__name__)


class VaultFile:
    """Reads and rewrites the raw bytes of one vault file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        return self.path.exists()

    def init(self) -> Path:
        """Create the parent directories and an empty vault file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("xb"):
                pass
        except FileExistsError as exc:
            raise AlreadyInitializedError(f"A vault already exists at {self.path}.") from exc
        except OSError as exc:
            raise StorageError(f"Cannot create vault at {self.path}: {exc}") from exc

        os.chmod(self.path, 0o600)
        logger.info("Created vault file %s", self.path)
        return self.path

    def read(self) -> tuple[bytes, bytes]:
        """Return *(nonce, ciphertext)* from the vault file."""
        try:
            data = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise NotInitializedError(
                f"No vault found at {self.path}. Run 'onepass init' first."
            ) from exc
        except OSError as exc:
            raise StorageError(f"Cannot read vault at {self.path}: {exc}") from exc

        return _parse(data)

    def rewrite(self, nonce: bytes, ciphertext: bytes) -> None:
        """Replace the whole file with *nonce* followed by *ciphertext*.

        Both parts are already in memory, so the file is written in a single
        pass. The bytes go to a sibling temp file first and are renamed over
        the vault, leaving the previous contents intact on failure.
        """
        if len(nonce) != NONCE_SIZE:
            raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}.")
        if not self.exists():
            raise NotInitializedError(
                f"No vault found at {self.path}. Run 'onepass init' first."
            )

        data = nonce + ciphertext
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_bytes(data)
            os.chmod(tmp, 0o600)
            tmp.replace(self.path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise StorageError(f"Cannot write vault at {self.path}: {exc}") from exc

        logger.debug("Rewrote vault %s (%d bytes)", self.path, len(data))

    def purge(self) -> None:
        """Delete the vault file."""
        try:
            self.path.unlink()
        except FileNotFoundError as exc:
            raise NotInitializedError(f"No vault found at {self.path}.") from exc
        except OSError as exc:
            raise StorageError(f"Cannot remove vault at {self.path}: {exc}") from exc
        logger.info("Purged vault file %s", self.path)

    def size(self) -> int:
        try:
            return self.path.stat().st_size
        except FileNotFoundError as exc:
            raise NotInitializedError(f"No vault found at {self.path}.") from exc


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def _parse(data: bytes) -> tuple[bytes, bytes]:
    """Split raw vault bytes into *(nonce, ciphertext)*."""
    if len(data) < NONCE_SIZE + TAG_SIZE:
        raise CorruptVaultError(
            "Vault file is truncated or corrupt. Run 'onepass purge' and 'onepass init' to start over."
        )
    return data[:NONCE_SIZE], data[NONCE_SIZE:]
