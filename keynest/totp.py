"""One-time codes (RFC 6238) for entries that carry a TOTP seed."""
import re
import time
import base64
import binascii
from typing import Optional, Union
from urllib.parse import parse_qs, unquote, urlparse

from cryptography.hazmat.primitives.hashes import SHA1
from cryptography.hazmat.primitives.twofactor.totp import TOTP
from pydantic import BaseModel

DEFAULT_PERIOD = 30
DEFAULT_DIGITS = 6

_WHITESPACE = re.compile(r"\s+")


class TotpParams(BaseModel):
    secret: str
    issuer: Optional[str] = None
    account: Optional[str] = None


class TotpCode(BaseModel):
    code: str
    remaining: int
    period: int


def normalise_b32_secret(value: str) -> str:
    return _WHITESPACE.sub("", value).upper()


def decode_b32_secret(value: str) -> bytes:
    """Decode a base32 seed, tolerating whitespace, case and missing padding."""
    secret = normalise_b32_secret(value).rstrip("=")
    secret += "=" * (-len(secret) % 8)
    try:
        return base64.b32decode(secret)
    except (binascii.Error, ValueError) as err:
        raise ValueError("Invalid base32 TOTP secret") from err


def parse_otpauth_uri(uri: str) -> TotpParams:
    """Parse an ``otpauth://totp/...`` provisioning URI.

    Raises:
        ValueError: If the URI is not a TOTP URI or has no secret.
    """
    parsed = urlparse(uri.strip())
    if parsed.scheme.lower() != "otpauth" or parsed.netloc.lower() != "totp":
        raise ValueError("Not a TOTP URI")
    query = parse_qs(parsed.query)
    secret = query.get("secret", [""])[0]
    if not secret:
        raise ValueError("TOTP URI missing secret")

    label = unquote(parsed.path.lstrip("/"))
    label_issuer = None
    account = label or None
    if ":" in label:
        label_issuer, _, account = label.partition(":")
        account = account.strip() or None
    issuer = query.get("issuer", [label_issuer])[0] or None
    return TotpParams(
        secret=normalise_b32_secret(secret),
        issuer=issuer,
        account=account,
    )


def generate_totp(
    secret: str,
    timestamp: Optional[Union[int, float]] = None,
    period: int = DEFAULT_PERIOD,
    digits: int = DEFAULT_DIGITS,
) -> TotpCode:
    """Compute the current code for a base32 seed.

    Args:
        secret: Base32 seed as stored in ``VaultEntry.totp_secret``.
        timestamp: Unix time in seconds (defaults to now).
        period: Time step in seconds.
        digits: Code length.
    """
    if timestamp is None:
        timestamp = time.time()
    totp = TOTP(
        decode_b32_secret(secret),
        digits,
        SHA1(),
        period,
        enforce_key_length=False,
    )
    epoch = int(timestamp)
    code = totp.generate(epoch).decode("ascii")
    return TotpCode(code=code, remaining=period - (epoch % period), period=period)
