"""Tests for Account and CredentialStore models."""

import pytest
from pydantic import ValidationError

from repo_broker.credentials.models import Account, CredentialStore, normalize_domain
from repo_broker.enums import ProviderType
from repo_broker.exceptions import AccountNotFoundError


@pytest.mark.parametrize(
    "domain,expected",
    [
        ("https://gitlab.example.com/", "gitlab.example.com"),
        ("http://gitlab.example.com", "gitlab.example.com"),
        ("github.com", "github.com"),
        ("  https://github.com  ", "github.com"),
    ],
)
def test_normalize_domain(domain, expected):
    """Test scheme and trailing slash are stripped."""
    assert normalize_domain(domain) == expected


class TestAccount:
    """Test Account model."""

    def test_provider_coerced_to_enum(self, work_account):
        """Test provider strings become ProviderType."""
        assert work_account.provider is ProviderType.GITHUB

    def test_unknown_provider_rejected(self):
        """Test unsupported providers fail validation."""
        with pytest.raises(ValidationError):
            Account(name="x", provider="bitbucket", api_url="", domain="bitbucket.org", token="t")

    def test_empty_name_rejected(self):
        """Test an account needs a name."""
        with pytest.raises(ValidationError):
            Account(name="", provider="github", api_url="", domain="github.com", token="t")

    def test_owners_cleaned(self):
        """Test blank and duplicate owners are dropped in order."""
        account = Account(
            name="x",
            provider="gitlab",
            api_url="",
            domain="gitlab.com",
            token="t",
            owners=["b", " a ", "", "b"],
        )

        assert account.owners == ["b", "a"]

    def test_wildcard(self, work_account, personal_account):
        """Test accounts without owners are wildcards."""
        assert personal_account.is_wildcard
        assert not work_account.is_wildcard
        assert work_account.has_owner("my-company")
        assert not work_account.has_owner("someone-else")

    def test_masked_token(self, work_account):
        """Test masking keeps four characters on each side."""
        assert work_account.masked_token == "ghp_********cdef"

    def test_masked_short_token(self):
        """Test tokens of eight characters or fewer are fully masked."""
        account = Account(name="x", provider="github", api_url="", domain="github.com", token="12345678")

        assert account.masked_token == "****"

    def test_record_omits_empty_owners(self, personal_account, work_account):
        """Test owners appear in the record only when set."""
        assert "owners" not in personal_account.to_record()
        assert work_account.to_record()["owners"] == ["my-company"]
        assert work_account.to_record()["provider"] == "github"


class TestCredentialStore:
    """Test in-memory store operations."""

    def test_add_appends(self, personal_account, work_account):
        """Test new names are appended in order."""
        store = CredentialStore()
        store.add_account(personal_account)
        store.add_account(work_account)

        assert [a.name for a in store.list_accounts()] == ["personal", "work"]

    def test_add_replaces_in_place(self, populated_store, work_account):
        """Test an existing name is replaced at its original position."""
        replacement = work_account.model_copy(update={"token": "ghp_rotated0123456789"})

        populated_store.add_account(replacement)

        assert len(populated_store) == 3
        assert populated_store.accounts[1].token == "ghp_rotated0123456789"

    def test_remove(self, populated_store):
        """Test removal returns the removed account."""
        removed = populated_store.remove_account("work")

        assert removed.name == "work"
        assert [a.name for a in populated_store.accounts] == ["personal", "gitlab-work"]

    def test_remove_unknown(self, populated_store):
        """Test removing an unknown name raises."""
        with pytest.raises(AccountNotFoundError, match="nope"):
            populated_store.remove_account("nope")

    def test_get_by_name(self, populated_store):
        """Test lookup by name."""
        assert populated_store.get_account("gitlab-work").provider is ProviderType.GITLAB

    def test_get_single_without_name(self, personal_account):
        """Test the only account is returned when no name is given."""
        store = CredentialStore(accounts=[personal_account])

        assert store.get_account() is personal_account

    def test_get_without_name_ambiguous(self, populated_store):
        """Test several accounts require a name."""
        with pytest.raises(AccountNotFoundError) as exc_info:
            populated_store.get_account()

        assert "--account" in exc_info.value.suggestion

    def test_get_from_empty_store(self):
        """Test an empty store raises with a login suggestion."""
        with pytest.raises(AccountNotFoundError, match="No accounts"):
            CredentialStore().get_account()

    def test_clear(self, populated_store):
        """Test clear empties the store and reports the count."""
        assert populated_store.clear() == 3
        assert len(populated_store) == 0
