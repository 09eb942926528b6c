import pytest
from nacl import pwhash

from keynest.data import VaultEntry
from keynest.vault import VaultService, SessionState
from keynest.vault import crypto


@pytest.fixture
def fast_kdf(monkeypatch):
    """Argon2id at libsodium's minimum cost so the suite stays fast."""
    monkeypatch.setattr(crypto, "OPSLIMIT", pwhash.argon2id.OPSLIMIT_MIN)
    monkeypatch.setattr(crypto, "MEMLIMIT", pwhash.argon2id.MEMLIMIT_MIN)


@pytest.fixture
def vault_path(tmp_path):
    """Vault location inside a directory that does not exist yet."""
    return tmp_path / "data" / "vault.bin"


@pytest.fixture
def service(fast_kdf):
    """A service with its own, independent session."""
    svc = VaultService(SessionState())
    yield svc
    svc.lock()


@pytest.fixture
def entry():
    """A fully populated entry."""
    return VaultEntry(
        id="3f2a9c",
        title="Example Mail",
        username="alice@example.com",
        password="Xk9#mP2$vL7!qR4@",
        totpSecret="JBSWY3DPEHPK3PXP",
        totpIssuer="Example",
        totpAccount="alice@example.com",
        tags=["work", "email", "work"],
        notes="recovery codes in the safe",
        updatedAt=1_700_000_000_000,
    )
