"""Vault records exchanged with the calling layer.

Field names on the wire are camelCase (``totpSecret``, ``updatedAt``);
Python attributes are snake_case. Both are accepted on input.
"""
import uuid
import time
from typing import Optional

from pydantic import BaseModel, Field

SCHEMA_VERSION = 1

_U64_MAX = 2 ** 64 - 1


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class VaultEntry(BaseModel):
    """One secret record."""

    id: str
    title: str
    username: str
    password: str
    totp_secret: Optional[str] = Field(default=None, alias="totpSecret")
    totp_issuer: Optional[str] = Field(default=None, alias="totpIssuer")
    totp_account: Optional[str] = Field(default=None, alias="totpAccount")
    tags: Optional[list[str]] = None
    notes: Optional[str] = None
    updated_at: int = Field(alias="updatedAt", ge=0, le=_U64_MAX)

    model_config = {"populate_by_name": True}

    @classmethod
    def new(
        cls,
        title: str,
        username: str = "",
        password: str = "",
        **fields,
    ) -> "VaultEntry":
        """Create an entry with a fresh id and the current timestamp."""
        return cls(
            id=uuid.uuid4().hex,
            title=title,
            username=username,
            password=password,
            updated_at=now_ms(),
            **fields,
        )

    def touch(self, **changes) -> "VaultEntry":
        """Return a validated copy with ``changes`` applied and ``updatedAt`` bumped.

        ``changes`` may use either field names or their camelCase aliases.
        """
        aliases = {f.alias: name for name, f in type(self).model_fields.items() if f.alias}
        fields = self.model_dump()
        for key, value in changes.items():
            fields[aliases.get(key, key)] = value
        fields["updated_at"] = now_ms()
        return type(self).model_validate(fields)


class VaultData(BaseModel):
    """The entire vault: schema version and ordered entries."""

    version: int = Field(default=SCHEMA_VERSION, ge=0)
    entries: list[VaultEntry] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "VaultData":
        return cls(version=SCHEMA_VERSION, entries=[])

    def to_json_dict(self) -> dict:
        """Structured form for the calling layer (camelCase, nulls kept)."""
        return self.model_dump(by_alias=True)
