"""
Vault Crypto Core — Key derivation, authenticated encryption, and serialization.

- Key derivation: Argon2id(password, salt) → 32-byte key (libsodium).
- Envelope: XChaCha20-Poly1305 IETF, random 192-bit nonce, no associated data.
- Payload: ``VaultData`` as orjson-encoded camelCase JSON.

Security Note:
    Never log passwords, keys, plaintext or ciphertext values.
    The KDF parameters are not recorded in the file format; changing them
    requires a new format version.
"""
import logging
from typing import Union

import orjson
from nacl import bindings, pwhash, utils
from nacl.exceptions import CryptoError as NaclCryptoError
from pydantic import ValidationError

from ..data import VaultData
from .exceptions import AuthenticationError, FormatError, KeyDerivationError

logger = logging.getLogger("keynest.vault.crypto")

KEY_SIZE = 32
SALT_SIZE = pwhash.argon2id.SALTBYTES  # 16
NONCE_SIZE = bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES  # 24
TAG_SIZE = bindings.crypto_aead_xchacha20poly1305_ietf_ABYTES  # 16

# Argon2id: 64 MiB, 3 passes, single lane.
OPSLIMIT = 3
MEMLIMIT = 64 * 1024 * 1024


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(password: Union[bytes, str], salt: bytes) -> bytes:
    """Derive a 32-byte key from a master password using Argon2id.

    Args:
        password: Master password (``str`` is encoded as UTF-8).
        salt: 16 random bytes stored in the vault header.

    Returns:
        32-byte derived key.

    Raises:
        KeyDerivationError: If the salt length or KDF parameters are invalid.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    if len(salt) != SALT_SIZE:
        raise KeyDerivationError(
            f"salt must be {SALT_SIZE} bytes, got {len(salt)}"
        )
    try:
        return pwhash.argon2id.kdf(
            KEY_SIZE,
            password,
            bytes(salt),
            opslimit=OPSLIMIT,
            memlimit=MEMLIMIT,
        )
    except (NaclCryptoError, ValueError, TypeError) as err:
        raise KeyDerivationError() from err


def generate_salt() -> bytes:
    """Return a fresh random salt for a new vault."""
    return utils.random(SALT_SIZE)


# ---------------------------------------------------------------------------
# Authenticated encryption
# ---------------------------------------------------------------------------

def seal(key: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
    """Encrypt plaintext under ``key`` with a fresh random nonce.

    Returns:
        Tuple of (nonce, ciphertext); the ciphertext carries the 16-byte tag.
    """
    if len(key) != KEY_SIZE:
        raise KeyDerivationError(f"key must be {KEY_SIZE} bytes")
    nonce = utils.random(NONCE_SIZE)
    ct = bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(
        bytes(plaintext), None, nonce, bytes(key),
    )
    return nonce, ct


def open_sealed(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """Decrypt and authenticate ``ciphertext``.

    Raises:
        AuthenticationError: Wrong key or tampered bytes (indistinguishable).
    """
    if len(key) != KEY_SIZE:
        raise KeyDerivationError(f"key must be {KEY_SIZE} bytes")
    if len(nonce) != NONCE_SIZE or len(ciphertext) < TAG_SIZE:
        raise AuthenticationError()
    try:
        return bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(
            bytes(ciphertext), None, bytes(nonce), bytes(key),
        )
    except NaclCryptoError as err:
        raise AuthenticationError() from err


# ---------------------------------------------------------------------------
# Payload serialization
# ---------------------------------------------------------------------------

def serialize_vault(vault: VaultData) -> bytes:
    """Serialize ``VaultData`` to JSON bytes for encryption."""
    return orjson.dumps(vault.model_dump(by_alias=True))


def deserialize_vault(data: bytes) -> VaultData:
    """Decode authenticated plaintext back into ``VaultData``.

    Raises:
        FormatError: If the plaintext is not a valid vault document.
    """
    try:
        return VaultData.model_validate(orjson.loads(data))
    except orjson.JSONDecodeError as err:
        raise FormatError("Vault payload is not valid JSON") from err
    except ValidationError as err:
        logger.debug("Vault payload failed validation: %d error(s)", err.error_count())
        raise FormatError("Vault payload does not match the vault schema") from err
