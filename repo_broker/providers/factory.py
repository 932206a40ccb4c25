"""Factory for creating hosting provider clients."""

import structlog

from repo_broker.credentials.models import Account
from repo_broker.enums import ProviderType
from repo_broker.exceptions import UnsupportedProviderError
from repo_broker.providers.base import VersionControlProvider
from repo_broker.providers.github import GitHubProvider
from repo_broker.providers.gitlab import GitLabProvider

log = structlog.get_logger(__name__)


def create_provider(
    provider: ProviderType | str,
    base_url: str,
    token: str,
    timeout: float = 30.0,
) -> VersionControlProvider:
    """Create the provider client for a provider tag.

    Args:
        provider: Provider kind ("github" or "gitlab")
        base_url: Web URL of the hosting instance
        token: Access token
        timeout: Request timeout in seconds

    Returns:
        VersionControlProvider instance

    Raises:
        UnsupportedProviderError: If the provider tag is not supported

    Example:
        >>> client = create_provider("gitlab", "https://gitlab.example.com", token)
        >>> client.api_url
        'https://gitlab.example.com/api/v4'
    """
    try:
        provider_type = ProviderType(provider)
    except ValueError as e:
        raise UnsupportedProviderError(str(provider)) from e

    log.debug("creating_provider", provider=str(provider_type), base_url=base_url)
    if provider_type == ProviderType.GITHUB:
        return GitHubProvider(base_url, token, timeout=timeout)
    return GitLabProvider(base_url, token, timeout=timeout)


def provider_for_account(account: Account, timeout: float = 30.0) -> VersionControlProvider:
    """Build a client from a stored account's provider, domain and token.

    The domain is passed as stored so a scheme given at login (e.g. http://) is kept.
    """
    return create_provider(account.provider, account.domain, account.token, timeout)
