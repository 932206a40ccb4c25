"""Select the account that applies to a domain, owner or module path.

A user may hold a scoped work account (``owners: [my-company]``) and a
personal wildcard account on the same domain. Repositories owned by
``my-company`` always resolve to the scoped account, even when the wildcard
account was registered first.
"""

import structlog

from repo_broker.credentials.models import Account, CredentialStore, normalize_domain
from repo_broker.exceptions import AccountNotFoundError

log = structlog.get_logger(__name__)


def split_module_path(module: str) -> tuple[str, str]:
    """Split a module path into domain and owner.

    Example:
        >>> split_module_path("github.com/acme/mathutils")
        ('github.com', 'acme')
    """
    parts = normalize_domain(module).split("/")
    domain = parts[0]
    owner = parts[1] if len(parts) > 1 else ""
    return domain, owner


class AccountResolver:
    """Resolve accounts from a :class:`CredentialStore`.

    Resolution for a domain and owner:
    1. Consider only accounts whose normalized domain matches
    2. An account listing the owner wins, wherever it appears
    3. Otherwise the first wildcard account (no owners) on the domain
    4. Otherwise AccountNotFoundError

    Example:
        >>> resolver = AccountResolver()
        >>> account = resolver.resolve_for_owner(store, "https://github.com/", "acme")
    """

    def resolve_for_owner(self, store: CredentialStore, domain: str, owner: str) -> Account:
        """Resolve the account for a repository owner on a domain.

        Raises:
            AccountNotFoundError: If neither a scoped nor a wildcard account matches
        """
        target = normalize_domain(domain)
        wildcard: Account | None = None

        for account in store.accounts:
            if account.normalized_domain != target:
                continue
            if account.has_owner(owner):
                log.debug("account_resolved", domain=target, owner=owner, account=account.name, match="owner")
                return account
            if wildcard is None and account.is_wildcard:
                wildcard = account

        if wildcard is not None:
            log.debug("account_resolved", domain=target, owner=owner, account=wildcard.name, match="wildcard")
            return wildcard

        raise AccountNotFoundError(
            f"No account found for {target}/{owner}",
            domain=target,
            owner=owner,
            suggestion=f"Add one with 'broker login', or pass --owners {owner} to scope an account" if owner else None,
        )

    def resolve_for_domain(self, store: CredentialStore, domain: str) -> Account:
        """Return the first account on a domain, without owner tie-breaks.

        Raises:
            AccountNotFoundError: If no account uses the domain
        """
        target = normalize_domain(domain)
        for account in store.accounts:
            if account.normalized_domain == target:
                return account

        raise AccountNotFoundError(
            f"No account found for domain: {target}",
            domain=target,
            suggestion="Add one with 'broker login'",
        )

    def resolve_for_module(self, store: CredentialStore, module: str) -> Account:
        """Resolve the account for a module path such as ``github.com/acme/lib``."""
        domain, owner = split_module_path(module)
        return self.resolve_for_owner(store, domain, owner)
