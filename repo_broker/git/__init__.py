"""Local Git access for repo-broker.

This package wraps the local working tree (remote URL, current branch,
ahead/behind counts, push), parses remote URLs into domain/owner/path, and
computes the branch synchronization state consulted before a release.

Example:
    >>> from repo_broker.git import BranchSyncEngine, LocalRepository
    >>> status = BranchSyncEngine(LocalRepository()).status("origin")
    >>> status.is_synced
    True
"""

from repo_broker.git.exceptions import (
    GitDiscoveryError,
    InvalidGitUrlError,
    NotAGitRepositoryError,
    RemoteQueryError,
)
from repo_broker.git.local import LocalRepository
from repo_broker.git.models import BranchStatus
from repo_broker.git.parser import GitUrlParser, is_valid_semver
from repo_broker.git.sync import BranchSyncEngine, RepositoryStatusSource

__all__ = [
    "BranchStatus",
    "BranchSyncEngine",
    "GitDiscoveryError",
    "GitUrlParser",
    "InvalidGitUrlError",
    "LocalRepository",
    "NotAGitRepositoryError",
    "RemoteQueryError",
    "RepositoryStatusSource",
    "is_valid_semver",
]
