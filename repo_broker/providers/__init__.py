"""Hosting provider clients (GitHub, GitLab)."""

from repo_broker.providers.base import Version, VersionControlProvider
from repo_broker.providers.factory import create_provider, provider_for_account
from repo_broker.providers.github import GitHubProvider, github_api_url
from repo_broker.providers.gitlab import GitLabProvider

__all__ = [
    "GitHubProvider",
    "GitLabProvider",
    "Version",
    "VersionControlProvider",
    "create_provider",
    "github_api_url",
    "provider_for_account",
]
