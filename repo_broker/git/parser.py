"""Git remote URL parsing.

Extracts the hosting domain, owner and repository path from SSH and HTTPS
remote URLs. GitLab subgroups are kept in the repository path.

Example:
    >>> parser = GitUrlParser("git@gitlab.example.com:group/sub/lib.git")
    >>> parser.host, parser.owner, parser.repo_path
    ('gitlab.example.com', 'group', 'group/sub/lib')
"""

import re
from typing import Literal

from repo_broker.enums import ProviderType
from repo_broker.git.exceptions import InvalidGitUrlError

SEMVER_PATTERN = re.compile(r"^v\d+\.\d+\.\d+$")


def is_valid_semver(tag: str) -> bool:
    """Check that a tag has the form ``vX.Y.Z``.

    Example:
        >>> is_valid_semver("v1.4.0")
        True
        >>> is_valid_semver("1.4.0")
        False
    """
    return SEMVER_PATTERN.match(tag) is not None


class GitUrlParser:
    """Parse a Git remote URL.

    Supported formats:
        - SSH: git@github.com:owner/repo.git
        - HTTPS: https://gitlab.example.com/group/sub/repo.git
        - HTTPS with port: https://gitlab.example.com:8443/owner/repo
    """

    # user@host:path (requires user@ so https://... never matches)
    SSH_PATTERN = re.compile(r"^(?P<user>\w+)@(?P<host>[a-zA-Z0-9._-]+):(?P<path>.+?)(?:\.git)?/?$")

    HTTPS_PATTERN = re.compile(
        r"^https?://(?:[^@/]+@)?(?P<host>[a-zA-Z0-9._-]+)(?::(?P<port>\d+))?/(?P<path>.+?)(?:\.git)?/?$"
    )

    def __init__(self, url: str) -> None:
        """Parse the URL immediately.

        Raises:
            InvalidGitUrlError: If the URL is not SSH or HTTPS, or lacks owner/repo
        """
        self.url = url.strip()
        self.url_type: Literal["ssh", "https"]
        self.port: int | None = None

        match = self.SSH_PATTERN.match(self.url)
        if match:
            self.url_type = "ssh"
        else:
            match = self.HTTPS_PATTERN.match(self.url)
            if not match:
                raise InvalidGitUrlError(
                    self.url,
                    reason="Must be SSH (git@host:path) or HTTPS (https://host/path)",
                )
            self.url_type = "https"
            port = match.group("port")
            self.port = int(port) if port else None

        self.host = match.group("host")
        path = match.group("path").strip("/").removesuffix(".git")
        parts = [part for part in path.split("/") if part]
        if len(parts) < 2:
            raise InvalidGitUrlError(self.url, reason=f"Path must contain owner/repo (got: {path})")

        self._parts = parts

    @property
    def owner(self) -> str:
        """First path component (user, organization or top-level group)."""
        return self._parts[0]

    @property
    def repo(self) -> str:
        """Last path component (repository name)."""
        return self._parts[-1]

    @property
    def repo_path(self) -> str:
        """Full ``owner/.../repo`` path as used by provider APIs."""
        return "/".join(self._parts)

    @property
    def domain(self) -> str:
        """Hosting domain in normalized account form (``host`` or ``host:port``)."""
        if self.port:
            return f"{self.host}:{self.port}"
        return self.host

    @property
    def base_url(self) -> str:
        """HTTPS base URL of the hosting domain, including a custom port."""
        return f"https://{self.domain}"

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.from_host(self.host)
