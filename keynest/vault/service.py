"""
VaultService — The six operations exposed to the calling layer.

- ``exists(path)`` — is there a vault file at ``path``
- ``init(path, password)`` — create a new, empty vault and open a session
- ``unlock(path, password)`` — open a session and return the decrypted vault
- ``lock()`` — end the session, zeroing key and salt
- ``load(path)`` — re-read and decrypt with the cached key
- ``save(path, vault)`` — encrypt with the cached key and replace the file

Security Note:
    Never log plaintext or ciphertext values. Only paths, entry counts and
    error kinds are logged.
"""
import os
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..data import VaultData
from . import crypto
from .codec import read_envelope, write_envelope
from .exceptions import (
    AlreadyExists, FormatError, NotFound, SaltMismatch, VaultError, VaultIOError,
)
from .session import SecretBytes, SessionState

logger = logging.getLogger("keynest.vault")

PathLike = Union[str, os.PathLike]


class VaultService:
    """Orchestrates key derivation, the cipher envelope and the file codec.

    The session is injected so that independent sessions can coexist (tests,
    multiple vaults); by default each service owns a fresh ``SessionState``.
    Every operation that touches secret material holds the session locks for
    its whole duration, which serializes concurrent callers.
    """

    def __init__(self, session: Optional[SessionState] = None):
        self.session = session if session is not None else SessionState()

    @property
    def is_unlocked(self) -> bool:
        return self.session.is_unlocked

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def init(self, path: PathLike, password: Union[str, bytes]) -> None:
        """Create a new vault at ``path`` and unlock it.

        Raises:
            AlreadyExists: If a file is already present at ``path``.
        """
        path = Path(path)
        with self.session.hold() as held:
            if path.exists():
                raise AlreadyExists()
            salt = SecretBytes(crypto.generate_salt())
            key: Optional[SecretBytes] = None
            try:
                key = SecretBytes(crypto.derive_key(password, bytes(salt)))
                plaintext = crypto.serialize_vault(VaultData.empty())
                nonce, ciphertext = crypto.seal(bytes(key), plaintext)
                write_envelope(path, bytes(salt), nonce, ciphertext)
            except BaseException:
                if key is not None:
                    key.wipe()
                salt.wipe()
                raise
            held.replace(key, salt)
        logger.info("Vault initialized: path=%s", path)

    def unlock(self, path: PathLike, password: Union[str, bytes]) -> VaultData:
        """Derive the key from ``password`` and decrypt the vault at ``path``.

        On failure the session is left as it was and the freshly derived key
        is wiped.

        Raises:
            NotFound: If no vault exists at ``path``.
            FormatError: If the file is not a supported envelope.
            CryptoError: Wrong password or corrupted vault.
        """
        path = Path(path)
        with self.session.hold() as held:
            if not path.exists():
                raise NotFound()
            disk_salt, nonce, ciphertext = read_envelope(path)
            salt = SecretBytes(disk_salt)
            key: Optional[SecretBytes] = None
            try:
                key = SecretBytes(crypto.derive_key(password, disk_salt))
                plaintext = crypto.open_sealed(bytes(key), nonce, ciphertext)
                vault = crypto.deserialize_vault(plaintext)
            except VaultError as err:
                if key is not None:
                    key.wipe()
                salt.wipe()
                logger.warning(
                    "Vault unlock failed: path=%s error=%s", path, type(err).__name__,
                )
                raise
            held.replace(key, salt)
        logger.info("Vault unlocked: path=%s entries=%d", path, len(vault.entries))
        return vault

    def lock(self) -> None:
        self.session.lock()

    def load(self, path: PathLike) -> Optional[VaultData]:
        """Re-read the vault with the cached key.

        Returns:
            The decrypted vault, or ``None`` if the file has been removed.

        Raises:
            VaultLocked: If no session is open.
            MissingSalt: If the session has a key but no salt.
            SaltMismatch: If the file was re-created under a different salt.
        """
        path = Path(path)
        with self.session.hold() as held:
            key = held.require_key()
            try:
                disk_salt, nonce, ciphertext = read_envelope(path)
            except VaultIOError as err:
                if isinstance(err.__cause__, FileNotFoundError):
                    logger.debug("Vault load: no file at path=%s", path)
                    return None
                raise
            cached_salt = held.require_salt()
            if cached_salt != disk_salt:
                logger.warning("Vault load refused: salt mismatch at path=%s", path)
                raise SaltMismatch()
            plaintext = crypto.open_sealed(bytes(key), nonce, ciphertext)
        vault = crypto.deserialize_vault(plaintext)
        logger.debug("Vault loaded: path=%s entries=%d", path, len(vault.entries))
        return vault

    def save(self, path: PathLike, vault: Union[VaultData, dict[str, Any]]) -> None:
        """Encrypt ``vault`` with the cached key and replace the file.

        The cached salt is trusted; the file is not re-read first.

        Raises:
            VaultLocked: If no session is open.
            MissingSalt: If the session has a key but no salt.
            FormatError: If ``vault`` is a dict that is not a valid vault.
        """
        path = Path(path)
        if not isinstance(vault, VaultData):
            try:
                vault = VaultData.model_validate(vault)
            except ValidationError as err:
                raise FormatError("Vault data does not match the vault schema") from err
        with self.session.hold() as held:
            key = held.require_key()
            salt = held.require_salt()
            plaintext = crypto.serialize_vault(vault)
            nonce, ciphertext = crypto.seal(bytes(key), plaintext)
            write_envelope(path, bytes(salt), nonce, ciphertext)
        logger.debug("Vault saved: path=%s entries=%d", path, len(vault.entries))
