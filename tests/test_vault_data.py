"""
Tests for the vault records and configuration.

Tests cover:
- VaultEntry / VaultData construction and aliases
- VaultEntry.new / touch helpers
- VaultConfig validation and environment loading
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from keynest.data import SCHEMA_VERSION, VaultData, VaultEntry
from keynest.vault import VaultConfig


class TestVaultEntry:
    """Tests for VaultEntry."""

    def test_alias_and_field_names(self, entry):
        """Test access by field name and dump by alias."""
        assert entry.totp_secret == "JBSWY3DPEHPK3PXP"
        dumped = entry.model_dump(by_alias=True)
        assert dumped["totpIssuer"] == "Example"
        assert dumped["updatedAt"] == 1_700_000_000_000

    def test_optionals_default_to_none(self):
        """Test that optional fields default to None."""
        e = VaultEntry(id="a", title="t", username="u", password="p", updatedAt=0)
        assert e.tags is None and e.notes is None and e.totp_account is None

    def test_updated_at_must_be_unsigned(self):
        """Test that negative timestamps are rejected."""
        with pytest.raises(ValidationError):
            VaultEntry(id="a", title="t", username="u", password="p", updatedAt=-1)

    def test_updated_at_fits_u64(self):
        """Test that timestamps beyond 64 bits are rejected."""
        with pytest.raises(ValidationError):
            VaultEntry(id="a", title="t", username="u", password="p", updatedAt=2 ** 64)

    def test_new_assigns_id_and_time(self):
        """Test that new() assigns a unique id and the current time."""
        a = VaultEntry.new("Bank", "alice", "pw", notes="n")
        b = VaultEntry.new("Bank", "alice", "pw")
        assert a.id != b.id
        assert a.updated_at > 0
        assert a.notes == "n"

    def test_touch(self, entry):
        """Test that touch applies changes and bumps updatedAt."""
        updated = entry.touch(password="new password")
        assert updated.password == "new password"
        assert updated.updated_at > entry.updated_at
        assert updated.id == entry.id
        assert entry.password == "Xk9#mP2$vL7!qR4@"

    def test_touch_accepts_aliases(self, entry):
        """Test that camelCase keys update the matching fields."""
        updated = entry.touch(totpSecret="NEWSECRET", totpIssuer=None)
        assert updated.totp_secret == "NEWSECRET"
        assert updated.totp_issuer is None
        assert updated.model_dump(by_alias=True)["totpSecret"] == "NEWSECRET"

    def test_touch_validates_changes(self, entry):
        """Test that touch rejects values the model would reject."""
        with pytest.raises(ValidationError):
            entry.touch(password=None)

    def test_touch_ignores_updated_at(self, entry):
        """Test that updatedAt is always set to the current time."""
        updated = entry.touch(updatedAt=0)
        assert updated.updated_at > entry.updated_at


class TestVaultData:
    """Tests for VaultData."""

    def test_empty(self):
        """Test the empty vault."""
        data = VaultData.empty()
        assert data.version == SCHEMA_VERSION == 1
        assert data.entries == []

    def test_order_preserved(self):
        """Test that entry order is preserved."""
        entries = [
            VaultEntry(id=str(i), title="t", username="u", password="p", updatedAt=i)
            for i in (3, 1, 2)
        ]
        assert [e.id for e in VaultData(entries=entries).entries] == ["3", "1", "2"]

    def test_to_json_dict(self, entry):
        """Test that the JSON dict uses camelCase keys."""
        raw = VaultData(entries=[entry]).to_json_dict()
        assert raw["entries"][0]["totpAccount"] == "alice@example.com"


class TestVaultConfig:
    """Tests for VaultConfig."""

    def test_defaults(self, tmp_path):
        """Test the default health thresholds."""
        config = VaultConfig(path=tmp_path / "vault.bin")
        assert config.max_password_age_days == 180
        assert config.min_password_score == 3

    def test_relative_path_rejected(self):
        """Test that a relative vault path is rejected."""
        with pytest.raises(ValidationError):
            VaultConfig(path=Path("relative/vault.bin"))

    def test_score_bounds(self, tmp_path):
        """Test that the minimum score is bounded to 0..4."""
        with pytest.raises(ValidationError):
            VaultConfig(path=tmp_path / "v", min_password_score=5)

    def test_from_env(self, tmp_path, monkeypatch):
        """Test loading configuration from the environment."""
        monkeypatch.setenv("KEYNEST_VAULT_PATH", str(tmp_path / "vault.bin"))
        monkeypatch.setenv("KEYNEST_MAX_PASSWORD_AGE_DAYS", "90")
        config = VaultConfig.from_env()
        assert config.path == tmp_path / "vault.bin"
        assert config.max_password_age_days == 90

    def test_from_env_missing_path(self, monkeypatch):
        """Test that a missing vault path variable is an error."""
        monkeypatch.delenv("KEYNEST_VAULT_PATH", raising=False)
        with pytest.raises(RuntimeError):
            VaultConfig.from_env()
