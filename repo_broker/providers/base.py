"""Hosting provider capability interface."""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class Version:
    """A tag on a hosted repository.

    Attributes:
        name: Tag name (e.g. v1.4.0)
        date: Commit date as YYYY-MM-DD, empty when unknown
    """

    name: str
    date: str = ""


class VersionControlProvider(Protocol):
    """Operations the release workflow and CLI need from a hosting provider.

    Implementations raise ProviderError for API failures.
    """

    @property
    def api_url(self) -> str:
        """Resolved API endpoint."""
        ...

    def validate_token(self) -> str:
        """Check the token and return the authenticated user name."""
        ...

    def list_versions(self, repo_path: str) -> list[Version]:
        """List tags of ``owner/repo``."""
        ...

    def create_tag(self, repo_path: str, tag: str) -> None:
        """Create ``tag`` on the head of the repository's default branch."""
        ...

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        ...

    def __enter__(self) -> "VersionControlProvider": ...

    def __exit__(self, *args: Any) -> None: ...
