"""Vault — Password-sealed storage for a single credential file.

Security Note (Threat Model):
    The derived key is resident in process memory while a session is
    unlocked and is zeroed on lock. Protection covers disk exposure and
    accidental retention only; an attacker executing code inside this
    process is out of scope.
"""

from .service import VaultService
from .session import SessionState, SecretBytes
from .config import VaultConfig
from .exceptions import (
    VaultError,
    FormatError,
    CryptoError,
    KeyDerivationError,
    AuthenticationError,
    StateError,
    AlreadyExists,
    NotFound,
    VaultLocked,
    MissingSalt,
    SaltMismatch,
    VaultIOError,
)

__all__ = [
    "VaultService",
    "SessionState",
    "SecretBytes",
    "VaultConfig",
    "VaultError",
    "FormatError",
    "CryptoError",
    "KeyDerivationError",
    "AuthenticationError",
    "StateError",
    "AlreadyExists",
    "NotFound",
    "VaultLocked",
    "MissingSalt",
    "SaltMismatch",
    "VaultIOError",
]
