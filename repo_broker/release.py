"""Release workflow: validate, sync, push, and tag a version on the host.

Steps for ``create_version``:
    1. Validate the tag as vX.Y.Z
    2. Locate the work tree and refuse uncommitted changes (unless forced)
    3. Parse the remote URL into domain, owner and repository path
    4. Resolve the account for that domain and owner
    5. Check branch sync; refuse when behind the remote (unless forced)
    6. Push the branch when it has unpushed commits (unless skipped)
    7. Create the tag through the provider API
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from repo_broker.credentials.models import Account
from repo_broker.credentials.resolver import AccountResolver
from repo_broker.credentials.store import CredentialFile
from repo_broker.exceptions import BranchOutOfDateError, InvalidVersionError, UncommittedChangesError
from repo_broker.git.local import LocalRepository
from repo_broker.git.models import BranchStatus
from repo_broker.git.parser import GitUrlParser, is_valid_semver
from repo_broker.git.sync import BranchSyncEngine
from repo_broker.providers.base import VersionControlProvider
from repo_broker.providers.factory import provider_for_account

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReleaseResult:
    """Outcome of a successful ``create_version`` call."""

    tag: str
    repo_path: str
    branch: str
    account_name: str
    domain: str
    pushed: bool
    status: BranchStatus


class ReleaseWorkflow:
    """Create version tags for the repository containing the working directory.

    Example:
        >>> workflow = ReleaseWorkflow(LocalRepository(), CredentialFile(path, KeyProvider()))
        >>> result = workflow.create_version("v1.2.0")
        >>> result.repo_path
        'acme/mathutils'
    """

    def __init__(
        self,
        repository: LocalRepository,
        credential_file: CredentialFile,
        resolver: AccountResolver | None = None,
        sync_engine: BranchSyncEngine | None = None,
        provider_factory: Callable[[Account], VersionControlProvider] = provider_for_account,
    ) -> None:
        self.repository = repository
        self.credential_file = credential_file
        self.resolver = resolver or AccountResolver()
        self.sync_engine = sync_engine or BranchSyncEngine(repository)
        self.provider_factory = provider_factory

    def create_version(
        self,
        tag: str,
        force: bool = False,
        skip_push: bool = False,
        remote: str = "origin",
    ) -> ReleaseResult:
        """Create ``tag`` on the hosting provider.

        Args:
            tag: Version tag in vX.Y.Z form
            force: Ignore uncommitted changes and a branch that is behind
            skip_push: Do not push unpushed commits before tagging
            remote: Remote whose URL identifies the hosted repository

        Returns:
            ReleaseResult describing what was tagged

        Raises:
            InvalidVersionError: If the tag is not vX.Y.Z
            NotAGitRepositoryError: If not inside a Git work tree
            UncommittedChangesError: If the tree is dirty and not forced
            InvalidGitUrlError: If the remote URL cannot be parsed
            AccountNotFoundError: If no account covers the remote's owner
            BranchOutOfDateError: If behind the remote and not forced
            ProviderError: If the tag cannot be created
        """
        if not is_valid_semver(tag):
            raise InvalidVersionError(tag)

        repo_root: Path = self.repository.repo_root()
        if not force and self.repository.has_uncommitted_changes():
            raise UncommittedChangesError()

        parsed = GitUrlParser(self.repository.remote_url(remote))
        store = self.credential_file.load()
        account = self.resolver.resolve_for_owner(store, parsed.domain, parsed.owner)
        log.info(
            "release_started",
            tag=tag,
            repo_root=str(repo_root),
            repo=parsed.repo_path,
            account=account.name,
        )

        status = self.sync_engine.status(remote)
        if status.needs_pull:
            if not force:
                raise BranchOutOfDateError(status.branch_name, remote, status.commits_behind)
            log.warning(
                "branch_behind_remote_forced",
                branch=status.branch_name,
                behind=status.commits_behind,
            )

        pushed = False
        if status.needs_push and not skip_push:
            self.repository.push(remote, status.branch_name, set_upstream=status.is_new_branch)
            pushed = True

        with self.provider_factory(account) as provider:
            provider.create_tag(parsed.repo_path, tag)
        log.info("version_created", tag=tag, repo=parsed.repo_path, pushed=pushed)

        return ReleaseResult(
            tag=tag,
            repo_path=parsed.repo_path,
            branch=status.branch_name,
            account_name=account.name,
            domain=parsed.domain,
            pushed=pushed,
            status=status,
        )
