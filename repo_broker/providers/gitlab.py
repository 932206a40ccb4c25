"""GitLab provider implementation using direct REST API calls."""

import urllib.parse
from typing import Any

import httpx
import structlog

from repo_broker.exceptions import ProviderError
from repo_broker.providers.base import Version

log = structlog.get_logger(__name__)


class GitLabProvider:
    """GitLab implementation using REST API v4 calls.

    Works against gitlab.com and self-hosted instances. The project path
    (``group/subgroup/repo``) is URL-encoded into the ``:id`` segment of
    each endpoint.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize GitLab provider.

        Args:
            base_url: GitLab base URL (e.g., https://gitlab.com)
            token: Personal access token with the api scope
            timeout: Request timeout in seconds
            client: Preconfigured HTTP client (mainly for tests)
        """
        base_url = base_url.strip().rstrip("/")
        if "://" not in base_url:
            base_url = f"https://{base_url}"
        self.base_url = base_url
        self.api_base = f"{self.base_url}/api/v4"
        self.token = token.strip() if token else token
        self._client = client or httpx.Client(
            base_url=self.api_base,
            headers={"PRIVATE-TOKEN": self.token},
            timeout=timeout,
        )

    @property
    def api_url(self) -> str:
        return self.api_base

    @staticmethod
    def _project_id(repo_path: str) -> str:
        return urllib.parse.quote(repo_path, safe="")

    def _request(self, method: str, path: str, expected: int = 200, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ProviderError: On transport errors or an unexpected status
        """
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ProviderError(f"GitLab request failed: {e}") from e

        if response.status_code != expected:
            raise ProviderError(
                f"GitLab API {method} {path} failed",
                status_code=response.status_code,
                response_text=response.text,
            )
        return response.json()

    def validate_token(self) -> str:
        try:
            data = self._request("GET", "/user")
        except ProviderError as e:
            if e.status_code is None:
                raise
            raise ProviderError(
                "Invalid token or missing permissions",
                status_code=e.status_code,
                response_text=e.response_text,
            ) from e
        username: str = data["username"]
        log.info("gitlab_token_validated", api_url=self.api_base, user=username)
        return username

    def list_versions(self, repo_path: str) -> list[Version]:
        data = self._request("GET", f"/projects/{self._project_id(repo_path)}/repository/tags")
        versions = []
        for tag_data in data:
            commit = tag_data.get("commit") or {}
            created_at = commit.get("created_at") or ""
            versions.append(Version(name=tag_data["name"], date=created_at[:10]))
        return versions

    def create_tag(self, repo_path: str, tag: str) -> None:
        project_id = self._project_id(repo_path)
        project = self._request("GET", f"/projects/{project_id}")
        default_branch = project.get("default_branch")
        if not default_branch:
            raise ProviderError(f"Project {repo_path} has no default branch")

        self._request(
            "POST",
            f"/projects/{project_id}/repository/tags",
            expected=201,
            data={"tag_name": tag, "ref": default_branch},
        )
        log.info("gitlab_tag_created", repo=repo_path, tag=tag, ref=default_branch)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitLabProvider":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
