"""Git data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BranchStatus:
    """Position of the local branch relative to its remote counterpart.

    Computed fresh on every check and never persisted.

    Attributes:
        branch_name: Current local branch
        remote_name: Remote the branch was compared against
        commits_ahead: Commits only on the local branch (all local commits
            when the branch is new)
        commits_behind: Commits only on the remote branch
        is_new_branch: The remote has no tracking ref for this branch
        fetch_failed: The refresh fetch failed, so remote data may be stale
    """

    branch_name: str
    remote_name: str
    commits_ahead: int = 0
    commits_behind: int = 0
    is_new_branch: bool = False
    fetch_failed: bool = False

    @property
    def remote_ref(self) -> str:
        return f"{self.remote_name}/{self.branch_name}"

    @property
    def needs_push(self) -> bool:
        return self.is_new_branch or self.commits_ahead > 0

    @property
    def needs_pull(self) -> bool:
        return self.commits_behind > 0

    @property
    def is_synced(self) -> bool:
        return not self.is_new_branch and self.commits_ahead == 0 and self.commits_behind == 0
