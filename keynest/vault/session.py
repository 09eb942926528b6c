"""
Vault Session — In-memory key/salt slot with explicit zeroization.

A ``SessionState`` is either *locked* (nothing resident) or *unlocked*
(one derived key and one salt resident). Secret bytes live in
``SecretBytes`` buffers that are overwritten with zeroes when the session
ends, when they are replaced, and when they are garbage-collected.

Security Note (Threat Model):
    Python cannot zero immutable ``bytes``; the short-lived ``bytes`` copies
    handed to libsodium are outside this guarantee. Protection covers disk
    exposure and accidental retention of the cached buffers, not an
    attacker running code in the same process.
"""
import hmac
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .exceptions import MissingSalt, VaultLocked

logger = logging.getLogger("keynest.vault.session")


class SecretBytes:
    """Mutable secret buffer that is zeroed on wipe, exit and collection."""

    __slots__ = ("_buf", "_wiped")

    def __init__(self, data: bytes):
        self._buf = bytearray(data)
        self._wiped = False

    def __len__(self) -> int:
        return len(self._buf)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __repr__(self) -> str:
        state = "wiped" if self.wiped else f"{len(self._buf)} bytes"
        return f"<SecretBytes [{state}]>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SecretBytes):
            other = other._buf
        if not isinstance(other, (bytes, bytearray)):
            return NotImplemented
        return hmac.compare_digest(self._buf, other)

    __hash__ = None  # mutable

    def __enter__(self) -> "SecretBytes":
        return self

    def __exit__(self, *exc) -> None:
        self.wipe()

    def __del__(self):
        self.wipe()

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Overwrite the buffer with zeroes in place."""
        buf = getattr(self, "_buf", None)
        if buf is None:
            return
        for i in range(len(buf)):
            buf[i] = 0
        self._wiped = True


class SessionState:
    """Holds the unlocked key and salt behind two mutual-exclusion locks.

    Locks are always taken key first, then salt. Use ``hold()`` to access
    both with guaranteed release on every exit path.
    """

    def __init__(self):
        self._key_lock = threading.Lock()
        self._salt_lock = threading.Lock()
        self._key: Optional[SecretBytes] = None
        self._salt: Optional[SecretBytes] = None

    def __repr__(self) -> str:
        return f"<SessionState [{'unlocked' if self.is_unlocked else 'locked'}]>"

    @property
    def is_unlocked(self) -> bool:
        with self._key_lock:
            return self._key is not None

    @contextmanager
    def hold(self) -> Iterator["_HeldSession"]:
        """Acquire both locks for the duration of the ``with`` block."""
        with self._key_lock, self._salt_lock:
            yield _HeldSession(self)

    def lock(self) -> None:
        """Wipe and drop the cached key and salt. Idempotent."""
        with self.hold() as held:
            was_unlocked = held.key is not None
            held.clear()
        if was_unlocked:
            logger.info("Vault session locked")


class _HeldSession:
    """View of a ``SessionState`` valid only while its locks are held."""

    __slots__ = ("_state",)

    def __init__(self, state: SessionState):
        self._state = state

    @property
    def key(self) -> Optional[SecretBytes]:
        return self._state._key

    @property
    def salt(self) -> Optional[SecretBytes]:
        return self._state._salt

    def require_key(self) -> SecretBytes:
        if self._state._key is None:
            raise VaultLocked()
        return self._state._key

    def require_salt(self) -> SecretBytes:
        if self._state._salt is None:
            raise MissingSalt()
        return self._state._salt

    def replace(self, key: SecretBytes, salt: SecretBytes) -> None:
        """Install new secret material, wiping whatever was cached."""
        self.clear()
        self._state._key = key
        self._state._salt = salt

    def clear(self) -> None:
        state = self._state
        if state._key is not None:
            state._key.wipe()
            state._key = None
        if state._salt is not None:
            state._salt.wipe()
            state._salt = None
