"""Exception hierarchy for onepass.

Every engine component raises one of these to its caller; nothing in the
engine retries or recovers locally.
"""


class VaultError(Exception):
    """Base class for every error raised by the vault engine."""


class StorageError(VaultError):
    """Raised when the vault file cannot be read or written."""


class NotInitializedError(StorageError):
    """Raised when no vault file exists at the requested path."""


class AlreadyInitializedError(StorageError):
    """Raised when initialising over an existing vault file."""


class CorruptVaultError(StorageError):
    """Raised when the vault file is too short to hold a nonce and a tag."""


class IncorrectPasswordError(VaultError, ValueError):
    """Raised when authenticated decryption fails.

    A wrong master password and a tampered vault are indistinguishable here:
    the AEAD tag is the only password check there is.
    """


class MalformedRecordError(VaultError):
    """Raised when the decrypted record stream holds an incomplete block."""


class ResourceNotFoundError(VaultError):
    """Raised when no record carries the requested name."""


class ResourceExistsError(VaultError):
    """Raised when creating or renaming onto a name already in use."""


class InvalidInputError(VaultError, ValueError):
    """Raised for unusable caller input (bad master password, reserved name)."""
