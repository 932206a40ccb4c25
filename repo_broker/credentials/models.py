"""Account and credential store models.

Example:
    >>> from repo_broker.credentials.models import Account, CredentialStore
    >>> store = CredentialStore()
    >>> store.add_account(
    ...     Account(
    ...         name="work",
    ...         provider="github",
    ...         api_url="https://api.github.com",
    ...         domain="https://github.com",
    ...         token="ghp_abc123",
    ...         owners=["my-company"],
    ...     )
    ... )
    >>> store.get_account().name
    'work'
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from repo_broker.enums import ProviderType
from repo_broker.exceptions import AccountNotFoundError


def normalize_domain(domain: str) -> str:
    """Strip the scheme and trailing slash from a domain.

    Example:
        >>> normalize_domain("https://gitlab.example.com/")
        'gitlab.example.com'
    """
    domain = domain.strip()
    domain = domain.removeprefix("https://").removeprefix("http://")
    return domain.removesuffix("/")


class Account(BaseModel):
    """A named credential bound to one hosting domain.

    Attributes:
        name: Unique account name within a store
        provider: Hosting provider kind
        api_url: Resolved API endpoint for this provider instance
        domain: Public hosting domain the token authenticates against
        token: Secret token (plaintext in memory, ciphertext on disk)
        owners: Owners (users/organizations) this account is scoped to;
            empty means the account accepts any owner on its domain
    """

    name: str = Field(..., min_length=1)
    provider: ProviderType
    api_url: str
    domain: str
    token: str
    owners: list[str] = Field(default_factory=list)

    @field_validator("owners")
    @classmethod
    def dedupe_owners(cls, v: list[str]) -> list[str]:
        """Drop blanks and duplicates while keeping order."""
        seen: list[str] = []
        for owner in v:
            owner = owner.strip()
            if owner and owner not in seen:
                seen.append(owner)
        return seen

    @property
    def normalized_domain(self) -> str:
        return normalize_domain(self.domain)

    @property
    def is_wildcard(self) -> bool:
        """True when the account is not scoped to specific owners."""
        return not self.owners

    def has_owner(self, owner: str) -> bool:
        return owner in self.owners

    @property
    def masked_token(self) -> str:
        """Token with everything but the first and last four characters hidden."""
        if len(self.token) <= 8:
            return "****"
        return f"{self.token[:4]}{'*' * 8}{self.token[-4:]}"

    def to_record(self) -> dict[str, Any]:
        """Serialize to the credential file record format.

        ``owners`` is omitted when empty.
        """
        record: dict[str, Any] = {
            "name": self.name,
            "provider": self.provider.value,
            "api_url": self.api_url,
            "domain": self.domain,
            "token": self.token,
        }
        if self.owners:
            record["owners"] = list(self.owners)
        return record


class CredentialStore(BaseModel):
    """Ordered collection of accounts.

    All operations act on memory only; persist with
    :meth:`repo_broker.credentials.store.CredentialFile.save`.
    """

    accounts: list[Account] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.accounts)

    def add_account(self, account: Account) -> None:
        """Add an account, replacing in place any account with the same name."""
        for index, existing in enumerate(self.accounts):
            if existing.name == account.name:
                self.accounts[index] = account
                return
        self.accounts.append(account)

    def remove_account(self, name: str) -> Account:
        """Remove an account by name.

        Returns:
            The removed account

        Raises:
            AccountNotFoundError: If no account has that name
        """
        for index, existing in enumerate(self.accounts):
            if existing.name == name:
                return self.accounts.pop(index)
        raise AccountNotFoundError(f"Account '{name}' not found")

    def get_account(self, name: str | None = None) -> Account:
        """Get an account by name, or the only account when no name is given.

        Raises:
            AccountNotFoundError: If the name is unknown, the store is empty,
                or no name was given while several accounts exist
        """
        if not name:
            if not self.accounts:
                raise AccountNotFoundError(
                    "No accounts configured",
                    suggestion="Add one with 'broker login'",
                )
            if len(self.accounts) == 1:
                return self.accounts[0]
            raise AccountNotFoundError(
                "Several accounts are configured",
                suggestion="Use --account to choose one",
            )

        for existing in self.accounts:
            if existing.name == name:
                return existing
        raise AccountNotFoundError(f"Account '{name}' not found")

    def list_accounts(self) -> list[Account]:
        return list(self.accounts)

    def clear(self) -> int:
        """Remove every account.

        Returns:
            Number of accounts removed
        """
        count = len(self.accounts)
        self.accounts = []
        return count
