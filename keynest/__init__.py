"""KeyNest.

Encrypted storage engine for a local secrets manager.
"""
from .version import (
    __title__, __description__, __version__, __author__, __author_email__
)
from .data import VaultData, VaultEntry
from .vault import VaultService, SessionState, VaultConfig

__all__ = (
    "VaultData",
    "VaultEntry",
    "VaultService",
    "SessionState",
    "VaultConfig",
)
