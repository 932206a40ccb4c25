"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from repo_broker.credentials.keys import KeyProvider
from repo_broker.credentials.models import Account, CredentialStore
from repo_broker.credentials.store import CredentialFile


@pytest.fixture
def encryption_key() -> bytes:
    """Fixed 32-byte key."""
    return bytes(range(32))


@pytest.fixture
def key_provider(encryption_key: bytes) -> MagicMock:
    """KeyProvider stand-in that never touches the OS keyring."""
    provider = MagicMock(spec=KeyProvider)
    provider.obtain_key.return_value = encryption_key
    return provider


@pytest.fixture
def credential_path(tmp_path: Path) -> Path:
    """Credential file location inside a not-yet-existing config dir."""
    return tmp_path / "config" / "config.json"


@pytest.fixture
def credential_file(credential_path: Path, key_provider: MagicMock) -> CredentialFile:
    """CredentialFile using the fixed key."""
    return CredentialFile(credential_path, key_provider)


@pytest.fixture
def work_account() -> Account:
    """GitHub account scoped to one organization."""
    return Account(
        name="work",
        provider="github",
        api_url="https://api.github.com",
        domain="https://github.com",
        token="ghp_work0123456789abcdef",
        owners=["my-company"],
    )


@pytest.fixture
def personal_account() -> Account:
    """GitHub wildcard account."""
    return Account(
        name="personal",
        provider="github",
        api_url="https://api.github.com",
        domain="github.com",
        token="ghp_personal0123456789",
    )


@pytest.fixture
def gitlab_account() -> Account:
    """Self-hosted GitLab wildcard account."""
    return Account(
        name="gitlab-work",
        provider="gitlab",
        api_url="https://gitlab.example.com/api/v4",
        domain="https://gitlab.example.com/",
        token="glpat-abcdefghijklmnop",
    )


@pytest.fixture
def populated_store(personal_account: Account, work_account: Account, gitlab_account: Account) -> CredentialStore:
    """Store with the wildcard account registered before the scoped one."""
    return CredentialStore(accounts=[personal_account, work_account, gitlab_account])
