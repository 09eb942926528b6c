"""
Vault Exceptions — Error kinds surfaced by the storage engine.

Each kind is distinguishable by the caller:

- ``FormatError``: the file exists but is not an envelope this engine reads.
- ``CryptoError``: wrong password or corrupted vault (deliberately merged).
- ``StateError``: operation attempted in the wrong session state.
- ``VaultIOError``: filesystem failure.
"""
from typing import Optional


class VaultError(Exception):
    """Base class for every error raised by the vault engine."""

    message: str = "Vault error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class FormatError(VaultError):
    message = "Invalid vault file"


class CryptoError(VaultError):
    """Wrong password or corrupted vault.

    The cause is never disclosed: a wrong key and tampered bytes
    produce the same error.
    """

    message = "Wrong password or corrupted vault"


class KeyDerivationError(CryptoError):
    message = "Key derivation failed"


class AuthenticationError(CryptoError):
    pass


class StateError(VaultError):
    message = "Invalid vault state"


class AlreadyExists(StateError):
    message = "Vault already exists"


class NotFound(StateError):
    message = "Vault does not exist"


class VaultLocked(StateError):
    message = "Vault is locked"


class MissingSalt(StateError):
    message = "Missing cached salt"


class SaltMismatch(StateError):
    message = "Salt mismatch"


class VaultIOError(VaultError):
    """Filesystem failure (permission denied, disk full, ...).

    The originating ``OSError`` is chained as ``__cause__``.
    """

    message = "Vault I/O error"

    def __init__(self, message: Optional[str] = None, *, error: Optional[OSError] = None):
        if message is None and error is not None:
            message = error.strerror or str(error)
        super().__init__(message)
        self.errno = error.errno if error is not None else None
        self.filename = error.filename if error is not None else None
