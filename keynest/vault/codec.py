"""
Vault File Codec — On-disk envelope layout and crash-safe persistence.

Format: [magic 8B][version 1B][salt 16B][nonce 24B][ciphertext + tag]

The file is never patched in place: every write builds the full envelope,
writes it to a sibling temp file and renames it over the destination.
"""
import os
import struct
import logging
from pathlib import Path
from typing import Union

from .crypto import NONCE_SIZE, SALT_SIZE
from .exceptions import FormatError, VaultIOError

logger = logging.getLogger("keynest.vault.codec")

MAGIC = b"KEYNEST\x00"
FILE_VERSION = 1

_HEADER = struct.Struct(f"!{len(MAGIC)}sB{SALT_SIZE}s{NONCE_SIZE}s")
HEADER_SIZE = _HEADER.size  # 49

TMP_SUFFIX = ".tmp"

PathLike = Union[str, os.PathLike]


def pack_envelope(salt: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """Build the complete envelope bytes."""
    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(salt)}")
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    return _HEADER.pack(MAGIC, FILE_VERSION, bytes(salt), bytes(nonce)) + bytes(ciphertext)


def unpack_envelope(blob: bytes) -> tuple[bytes, bytes, bytes]:
    """Validate the header and split an envelope.

    Returns:
        Tuple of (salt, nonce, ciphertext).

    Raises:
        FormatError: Truncated header, bad magic, or unsupported version.
    """
    if len(blob) < HEADER_SIZE:
        raise FormatError("Vault file too small")
    magic, version, salt, nonce = _HEADER.unpack_from(blob)
    if magic != MAGIC:
        raise FormatError("Invalid vault file")
    if version != FILE_VERSION:
        raise FormatError(f"Unsupported vault file version: {version}")
    return salt, nonce, blob[HEADER_SIZE:]


def temp_path_for(path: PathLike) -> Path:
    path = Path(path)
    return path.with_name(path.name + TMP_SUFFIX)


def _fsync_dir(directory: Path) -> None:
    """Flush a directory entry so a rename survives power loss (POSIX only)."""
    if os.name != "posix":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def write_envelope(
    path: PathLike, salt: bytes, nonce: bytes, ciphertext: bytes,
) -> int:
    """Atomically replace ``path`` with a new envelope.

    Returns:
        Number of bytes written.

    Raises:
        VaultIOError: On any filesystem failure; the previous file is untouched.
    """
    path = Path(path)
    data = pack_envelope(salt, nonce, ciphertext)
    tmp = temp_path_for(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
        _fsync_dir(path.parent)
    except OSError as err:
        logger.error("Vault write failed: path=%s error=%s", path, err.strerror or err)
        try:
            tmp.unlink()
        except FileNotFoundError:
            pass
        except OSError as cleanup_err:
            logger.warning("Could not remove temp file %s: %s", tmp, cleanup_err)
        raise VaultIOError(error=err) from err
    logger.debug("Vault written: path=%s size=%d", path, len(data))
    return len(data)


def read_envelope(path: PathLike) -> tuple[bytes, bytes, bytes]:
    """Read and validate the envelope stored at ``path``.

    Returns:
        Tuple of (salt, nonce, ciphertext).

    Raises:
        FormatError: If the file is not a supported envelope.
        VaultIOError: If the file cannot be read.
    """
    path = Path(path)
    try:
        blob = path.read_bytes()
    except OSError as err:
        raise VaultIOError(error=err) from err
    return unpack_envelope(blob)
