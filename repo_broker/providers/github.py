"""GitHub provider implementation using PyGithub."""

from typing import Any

import structlog
from github import Auth, Github, GithubException  # type: ignore[import-not-found]

from repo_broker.credentials.models import normalize_domain
from repo_broker.exceptions import ProviderError
from repo_broker.providers.base import Version

log = structlog.get_logger(__name__)

PUBLIC_DOMAIN = "github.com"
PUBLIC_API_URL = "https://api.github.com"


def github_api_url(base_url: str) -> str:
    """Map a GitHub web URL to its REST API endpoint.

    Example:
        >>> github_api_url("https://github.com")
        'https://api.github.com'
        >>> github_api_url("https://github.acme.com/")
        'https://github.acme.com/api/v3'
    """
    domain = normalize_domain(base_url)
    if not domain or domain == PUBLIC_DOMAIN:
        return PUBLIC_API_URL
    scheme = "http://" if base_url.strip().startswith("http://") else "https://"
    return f"{scheme}{domain}/api/v3"


class GitHubProvider:
    """GitHub (github.com or Enterprise) implementation of VersionControlProvider."""

    def __init__(self, base_url: str, token: str, timeout: float = 30.0) -> None:
        """Initialize GitHub provider.

        Args:
            base_url: Web URL of the GitHub instance (e.g. https://github.com)
            token: Personal access token
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token.strip() if token else token
        self._api_url = github_api_url(base_url)
        self._client = Github(auth=Auth.Token(self.token), base_url=self._api_url, timeout=int(timeout))

    @property
    def api_url(self) -> str:
        return self._api_url

    def validate_token(self) -> str:
        try:
            login: str = self._client.get_user().login
        except GithubException as e:
            raise ProviderError("Invalid token or missing permissions", status_code=e.status) from e
        log.info("github_token_validated", api_url=self._api_url, user=login)
        return login

    def list_versions(self, repo_path: str) -> list[Version]:
        try:
            repo = self._client.get_repo(repo_path)
            versions = []
            for tag in repo.get_tags():
                author = tag.commit.commit.author
                date = author.date.strftime("%Y-%m-%d") if author and author.date else ""
                versions.append(Version(name=tag.name, date=date))
        except GithubException as e:
            raise ProviderError(f"Failed to list tags for {repo_path}", status_code=e.status) from e
        return versions

    def create_tag(self, repo_path: str, tag: str) -> None:
        try:
            repo = self._client.get_repo(repo_path)
            branch = repo.get_branch(repo.default_branch)
            repo.create_git_ref(ref=f"refs/tags/{tag}", sha=branch.commit.sha)
        except GithubException as e:
            raise ProviderError(
                f"Failed to create tag {tag} on {repo_path}",
                status_code=e.status,
                response_text=str(e.data),
            ) from e
        log.info("github_tag_created", repo=repo_path, tag=tag, sha=branch.commit.sha)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubProvider":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
