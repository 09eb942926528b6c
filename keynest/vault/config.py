"""
Vault Configuration — Validated settings for host applications.

The engine itself never reads the environment; a host may build its
settings with ``VaultConfig.from_env()``:

    KEYNEST_VAULT_PATH = <absolute path to the vault file>
    KEYNEST_MAX_PASSWORD_AGE_DAYS = <integer, optional>

Key-derivation and file-format constants are not configuration: the file
format does not record them.

Security Note:
    Never log passwords or key material. Only log paths.
"""
import os
import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("keynest.vault")


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    path: Path
    max_password_age_days: int = Field(default=180, ge=1)
    min_password_score: int = Field(default=3, ge=0, le=4)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: Path) -> Path:
        """The engine is always handed an absolute file path."""
        if not v.is_absolute():
            raise ValueError(f"Vault path must be absolute: {v}")
        return v

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Raises:
            RuntimeError: If KEYNEST_VAULT_PATH is not set.
        """
        raw_path = os.environ.get("KEYNEST_VAULT_PATH")
        if not raw_path:
            raise RuntimeError(
                "KEYNEST_VAULT_PATH environment variable is not set"
            )
        values: dict = {"path": Path(raw_path).expanduser()}
        max_age = os.environ.get("KEYNEST_MAX_PASSWORD_AGE_DAYS")
        if max_age is not None:
            values["max_password_age_days"] = int(max_age)
        logger.debug("Vault config loaded from environment: path=%s", values["path"])
        return cls(**values)
