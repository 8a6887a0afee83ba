"""Cryptographic primitives for onepass.

Key derivation: SHA-256 of the UTF-8 master password (32-byte key).
Encryption:     ChaCha20-Poly1305 with a caller-supplied 12-byte nonce.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .errors import IncorrectPasswordError

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


def derive_key(password: str) -> bytes:
    """Return the 32-byte ChaCha20-Poly1305 key for *password*."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(password.encode("utf-8"))
    return digest.finalize()


def generate_nonce() -> bytes:
    """Return a cryptographically-random 12-byte nonce."""
    return os.urandom(NONCE_SIZE)


def _cipher(key: bytes, nonce: bytes) -> ChaCha20Poly1305:
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}.")
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}.")
    return ChaCha20Poly1305(key)


def encrypt(key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
    """Encrypt *plaintext*; the result carries a 16-byte authentication tag."""
    return _cipher(key, nonce).encrypt(nonce, plaintext, None)


def decrypt(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """Decrypt *ciphertext*; raises :class:`IncorrectPasswordError` on tag mismatch."""
    cipher = _cipher(key, nonce)
    try:
        return cipher.decrypt(nonce, ciphertext, None)
    except InvalidTag as exc:
        raise IncorrectPasswordError("Incorrect password or corrupted vault.") from exc
