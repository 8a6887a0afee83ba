"""onepass — a single-file, password-protected credential vault."""

__version__ = "0.3.0"

from .errors import (  # noqa: E402
    IncorrectPasswordError,
    InvalidInputError,
    MalformedRecordError,
    NotInitializedError,
    ResourceExistsError,
    ResourceNotFoundError,
    StorageError,
    VaultError,
)
from .guard import OperationGuard  # noqa: E402
from .models import Resource, ResourceField  # noqa: E402
from .resources import ResourceStore  # noqa: E402
from .store import VaultFile  # noqa: E402

__all__ = [
    "IncorrectPasswordError",
    "InvalidInputError",
    "MalformedRecordError",
    "NotInitializedError",
    "OperationGuard",
    "Resource",
    "ResourceExistsError",
    "ResourceField",
    "ResourceNotFoundError",
    "ResourceStore",
    "StorageError",
    "VaultError",
    "VaultFile",
    "__version__",
]
