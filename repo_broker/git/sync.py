"""Branch synchronization state engine.

Classifies the current local branch against its remote counterpart before a
release is allowed to touch the remote:

    New        remote has no ref for the branch; every local commit is ahead
    Synced     ahead == 0 and behind == 0
    NeedsPush  ahead > 0, behind == 0
    NeedsPull  behind > 0 (possibly also ahead)

A failed refresh fetch does not stop the check. The status is computed from
the existing remote-tracking refs and flagged with ``fetch_failed``.
"""

from typing import Protocol

import structlog

from repo_broker.exceptions import GitOperationError
from repo_broker.git.models import BranchStatus

log = structlog.get_logger(__name__)


class RepositoryStatusSource(Protocol):
    """Local repository operations the sync engine depends on."""

    def current_branch(self) -> str: ...

    def fetch(self, remote: str) -> None: ...

    def has_ref(self, ref: str) -> bool: ...

    def count_commits(self, revision: str) -> int: ...


class BranchSyncEngine:
    """Compute :class:`BranchStatus` for the checked-out branch.

    Example:
        >>> engine = BranchSyncEngine(LocalRepository())
        >>> status = engine.status("origin")
        >>> status.needs_push, status.needs_pull
        (True, False)
    """

    def __init__(self, repository: RepositoryStatusSource) -> None:
        self.repository = repository

    def status(self, remote: str = "origin") -> BranchStatus:
        """Compute the branch position relative to ``remote``.

        Raises:
            NotAGitRepositoryError: If not inside a Git work tree
            RemoteQueryError: If the branch or commit counts cannot be read
        """
        branch = self.repository.current_branch()
        fetch_failed = not self._refresh(remote)
        remote_ref = f"{remote}/{branch}"

        if not self.repository.has_ref(remote_ref):
            ahead = self.repository.count_commits("HEAD")
            status = BranchStatus(
                branch_name=branch,
                remote_name=remote,
                commits_ahead=ahead,
                is_new_branch=True,
                fetch_failed=fetch_failed,
            )
        else:
            status = BranchStatus(
                branch_name=branch,
                remote_name=remote,
                commits_ahead=self.repository.count_commits(f"{remote_ref}..HEAD"),
                commits_behind=self.repository.count_commits(f"HEAD..{remote_ref}"),
                fetch_failed=fetch_failed,
            )

        log.info(
            "branch_status",
            branch=branch,
            remote=remote,
            ahead=status.commits_ahead,
            behind=status.commits_behind,
            new=status.is_new_branch,
            fetch_failed=fetch_failed,
        )
        return status

    def _refresh(self, remote: str) -> bool:
        """Fetch ``remote``; report failure instead of raising."""
        try:
            self.repository.fetch(remote)
        except GitOperationError as e:
            log.warning("fetch_failed_using_cached_refs", remote=remote, error=str(e))
            return False
        return True
