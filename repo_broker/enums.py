"""Enumerations for repo-broker provider types."""

from enum import Enum


class ProviderType(str, Enum):
    """Hosting providers an account can authenticate against.

    Supported configurations:
    - github: github.com or a GitHub Enterprise deployment
    - gitlab: gitlab.com or a self-hosted GitLab instance
    """

    GITHUB = "github"
    GITLAB = "gitlab"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_host(cls, host: str) -> "ProviderType":
        """Guess the provider kind from a hosting domain.

        Hosts containing "github" map to GitHub; everything else is treated
        as GitLab, which is the common case for self-hosted domains.
        """
        if "github" in host.lower():
            return cls.GITHUB
        return cls.GITLAB
