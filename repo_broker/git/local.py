"""Local Git working tree queries.

Thin wrapper over GitPython exposing the read-only status queries and the
push operation used by the branch sync engine and the release workflow.
Command output is returned trimmed; failures surface as RemoteQueryError.

Dependencies:
    Requires GitPython (gitpython) and a ``git`` executable.
"""

from pathlib import Path

import git
import structlog
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from repo_broker.git.exceptions import NotAGitRepositoryError, RemoteQueryError

log = structlog.get_logger(__name__)


class LocalRepository:
    """Queries against the Git work tree containing ``repo_path``.

    The git.Repo object is opened lazily on first use, so instances can be
    created before knowing whether the path is inside a repository.

    Example:
        >>> repository = LocalRepository()
        >>> repository.current_branch()
        'main'
        >>> repository.count_commits("origin/main..HEAD")
        2
    """

    def __init__(self, repo_path: str | Path = ".") -> None:
        self.repo_path = Path(repo_path).resolve()
        self._repo: git.Repo | None = None

    def _get_repo(self) -> git.Repo:
        """Open the repository on first access.

        Raises:
            NotAGitRepositoryError: If the path is not within a Git work tree
        """
        if self._repo is None:
            try:
                repo = git.Repo(self.repo_path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise NotAGitRepositoryError(str(self.repo_path)) from e
            if repo.bare:
                raise NotAGitRepositoryError(str(self.repo_path))
            self._repo = repo
        return self._repo

    def _run(self, operation: str, *args: str) -> str:
        repo = self._get_repo()
        try:
            output: str = repo.git.execute(["git", *args])
        except GitCommandError as e:
            detail = (e.stderr or str(e)).strip()
            raise RemoteQueryError(operation, detail) from e
        return output.strip()

    def repo_root(self) -> Path:
        """Top-level directory of the work tree."""
        return Path(self._run("repo_root", "rev-parse", "--show-toplevel"))

    def has_uncommitted_changes(self) -> bool:
        """True when ``git status --porcelain`` reports anything."""
        return bool(self._run("status", "status", "--porcelain"))

    def remote_url(self, remote: str) -> str:
        return self._run("remote_url", "remote", "get-url", remote)

    def current_branch(self) -> str:
        """Name of the checked-out branch.

        Raises:
            RemoteQueryError: If HEAD is detached
        """
        branch = self._run("current_branch", "rev-parse", "--abbrev-ref", "HEAD")
        if branch == "HEAD":
            raise RemoteQueryError(
                "current_branch",
                "HEAD is detached",
                hint="Check out a branch before creating a version.",
            )
        return branch

    def fetch(self, remote: str) -> None:
        self._run("fetch", "fetch", remote)

    def has_ref(self, ref: str) -> bool:
        """Whether ``ref`` (e.g. ``origin/main``) resolves to a commit."""
        try:
            self._run("rev_parse", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}")
        except RemoteQueryError:
            return False
        return True

    def count_commits(self, revision: str) -> int:
        """Count commits in a revision range (``git rev-list --count``)."""
        output = self._run("rev_list", "rev-list", "--count", revision)
        try:
            return int(output)
        except ValueError as e:
            raise RemoteQueryError("rev_list", f"unexpected commit count: {output!r}") from e

    def push(self, remote: str, branch: str, set_upstream: bool = False) -> None:
        """Push ``branch`` to ``remote``, optionally setting the upstream."""
        args = ["push", "-u", remote, branch] if set_upstream else ["push", remote, branch]
        self._run("push", *args)
        log.info("branch_pushed", remote=remote, branch=branch, set_upstream=set_upstream)
