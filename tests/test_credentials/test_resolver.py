"""Tests for account resolution by domain, owner and module path."""

import pytest

from repo_broker.credentials.models import Account, CredentialStore
from repo_broker.credentials.resolver import AccountResolver, split_module_path
from repo_broker.exceptions import AccountNotFoundError


@pytest.fixture
def resolver():
    """Create AccountResolver instance."""
    return AccountResolver()


class TestResolveForOwner:
    """Test owner-aware resolution."""

    def test_scoped_account_beats_earlier_wildcard(self, resolver, populated_store):
        """Test an owner match wins even when a wildcard was registered first."""
        account = resolver.resolve_for_owner(populated_store, "github.com", "my-company")

        assert account.name == "work"

    def test_wildcard_for_other_owners(self, resolver, populated_store):
        """Test unknown owners fall back to the wildcard account."""
        account = resolver.resolve_for_owner(populated_store, "github.com", "octocat")

        assert account.name == "personal"

    def test_first_wildcard_wins(self, resolver, personal_account):
        """Test the earliest wildcard is used when several exist."""
        second = personal_account.model_copy(update={"name": "second"})
        store = CredentialStore(accounts=[personal_account, second])

        assert resolver.resolve_for_owner(store, "github.com", "anyone").name == "personal"

    def test_domain_normalization(self, resolver, populated_store):
        """Test scheme and trailing slash are ignored on both sides."""
        account = resolver.resolve_for_owner(populated_store, "https://gitlab.example.com/", "group")

        assert account.name == "gitlab-work"

    def test_other_domain_not_considered(self, resolver, work_account):
        """Test accounts on other domains never match."""
        store = CredentialStore(accounts=[work_account])

        with pytest.raises(AccountNotFoundError) as exc_info:
            resolver.resolve_for_owner(store, "gitlab.com", "my-company")

        assert exc_info.value.domain == "gitlab.com"
        assert exc_info.value.owner == "my-company"

    def test_only_scoped_accounts_no_match(self, resolver, work_account):
        """Test an owner outside every scope fails without a wildcard."""
        store = CredentialStore(accounts=[work_account])

        with pytest.raises(AccountNotFoundError) as exc_info:
            resolver.resolve_for_owner(store, "github.com", "octocat")

        assert "--owners octocat" in exc_info.value.suggestion
        assert "github.com/octocat" in str(exc_info.value)

    def test_empty_store(self, resolver):
        """Test an empty store fails."""
        with pytest.raises(AccountNotFoundError):
            resolver.resolve_for_owner(CredentialStore(), "github.com", "octocat")

    def test_scoped_account_with_several_owners(self, resolver):
        """Test any listed owner selects the scoped account."""
        scoped = Account(
            name="tools",
            provider="gitlab",
            api_url="https://gitlab.com/api/v4",
            domain="gitlab.com",
            token="glpat-x",
            owners=["company", "company-tools"],
        )
        store = CredentialStore(accounts=[scoped])

        assert resolver.resolve_for_owner(store, "gitlab.com", "company-tools") is scoped


class TestResolveForDomain:
    """Test domain-only resolution."""

    def test_first_account_on_domain(self, resolver, populated_store):
        """Test the first account on the domain is returned regardless of owners."""
        assert resolver.resolve_for_domain(populated_store, "https://github.com").name == "personal"

    def test_unknown_domain(self, resolver, populated_store):
        """Test an unknown domain fails."""
        with pytest.raises(AccountNotFoundError, match="bitbucket.org"):
            resolver.resolve_for_domain(populated_store, "bitbucket.org")


class TestResolveForModule:
    """Test module path resolution."""

    @pytest.mark.parametrize(
        "module,expected",
        [
            ("github.com/acme/mathutils", ("github.com", "acme")),
            ("https://gitlab.example.com/group/sub/lib", ("gitlab.example.com", "group")),
            ("github.com", ("github.com", "")),
        ],
    )
    def test_split_module_path(self, module, expected):
        """Test domain and owner extraction."""
        assert split_module_path(module) == expected

    def test_module_uses_owner_priority(self, resolver, populated_store):
        """Test module resolution applies the owner rules."""
        assert resolver.resolve_for_module(populated_store, "github.com/my-company/api").name == "work"
        assert resolver.resolve_for_module(populated_store, "github.com/someone/lib").name == "personal"
