"""Tests for repo_broker/release.py - version creation workflow."""

from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest

from repo_broker.credentials.store import CredentialFile
from repo_broker.exceptions import (
    AccountNotFoundError,
    BranchOutOfDateError,
    InvalidVersionError,
    ProviderError,
    UncommittedChangesError,
)
from repo_broker.git.exceptions import InvalidGitUrlError, NotAGitRepositoryError
from repo_broker.git.local import LocalRepository
from repo_broker.git.models import BranchStatus
from repo_broker.release import ReleaseWorkflow


@pytest.fixture
def repository():
    """LocalRepository stand-in for a clean work tree on main."""
    repo = MagicMock(spec=LocalRepository)
    repo.repo_root.return_value = Path("/work/mathutils")
    repo.has_uncommitted_changes.return_value = False
    repo.remote_url.return_value = "git@github.com:my-company/mathutils.git"
    return repo


@pytest.fixture
def store_file(populated_store):
    """Credential file stand-in returning the populated store."""
    file = MagicMock(spec=CredentialFile)
    file.load.return_value = populated_store
    return file


@pytest.fixture
def sync_engine():
    """Sync engine reporting a synced branch by default."""
    engine = Mock()
    engine.status.return_value = BranchStatus(branch_name="main", remote_name="origin")
    return engine


@pytest.fixture
def provider():
    """Provider client stand-in, usable as a context manager."""
    client = MagicMock()
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    return client


@pytest.fixture
def workflow(repository, store_file, sync_engine, provider):
    """ReleaseWorkflow wired to the stand-ins."""
    return ReleaseWorkflow(
        repository,
        store_file,
        sync_engine=sync_engine,
        provider_factory=lambda account: provider,
    )


class TestCreateVersion:
    """Tests for ReleaseWorkflow.create_version."""

    def test_synced_branch(self, workflow, repository, provider):
        """Should tag without pushing when the branch is synced."""
        result = workflow.create_version("v1.2.0")

        provider.create_tag.assert_called_once_with("my-company/mathutils", "v1.2.0")
        repository.push.assert_not_called()
        assert result.tag == "v1.2.0"
        assert result.repo_path == "my-company/mathutils"
        assert result.account_name == "work"
        assert result.domain == "github.com"
        assert result.branch == "main"
        assert result.pushed is False

    def test_account_from_owner(self, workflow, repository, store_file, sync_engine):
        """Should pass the resolved account to the provider factory."""
        repository.remote_url.return_value = "https://github.com/octocat/hello.git"
        seen = []
        factory_workflow = ReleaseWorkflow(
            repository,
            store_file,
            sync_engine=sync_engine,
            provider_factory=lambda account: seen.append(account) or MagicMock(),
        )

        factory_workflow.create_version("v0.1.0")

        assert [account.name for account in seen] == ["personal"]

    def test_invalid_tag(self, workflow, repository):
        """Should reject non-semver tags before touching Git."""
        with pytest.raises(InvalidVersionError) as exc_info:
            workflow.create_version("1.2.0")

        assert exc_info.value.suggestion is not None
        repository.repo_root.assert_not_called()

    def test_not_a_repository(self, workflow, repository):
        """Should propagate NotAGitRepositoryError."""
        repository.repo_root.side_effect = NotAGitRepositoryError("/tmp")

        with pytest.raises(NotAGitRepositoryError):
            workflow.create_version("v1.0.0")

    def test_uncommitted_changes(self, workflow, repository, provider):
        """Should refuse a dirty tree."""
        repository.has_uncommitted_changes.return_value = True

        with pytest.raises(UncommittedChangesError):
            workflow.create_version("v1.0.0")

        provider.create_tag.assert_not_called()

    def test_uncommitted_changes_forced(self, workflow, repository, provider):
        """Should ignore a dirty tree with force."""
        repository.has_uncommitted_changes.return_value = True

        workflow.create_version("v1.0.0", force=True)

        provider.create_tag.assert_called_once()

    def test_invalid_remote_url(self, workflow, repository):
        """Should propagate URL parsing errors."""
        repository.remote_url.return_value = "file:///srv/repo"

        with pytest.raises(InvalidGitUrlError):
            workflow.create_version("v1.0.0")

    def test_no_account(self, workflow, repository):
        """Should fail when no account covers the remote."""
        repository.remote_url.return_value = "git@bitbucket.org:team/app.git"

        with pytest.raises(AccountNotFoundError):
            workflow.create_version("v1.0.0")

    def test_behind_remote(self, workflow, sync_engine, provider, repository):
        """Should refuse to tag when the branch is behind."""
        sync_engine.status.return_value = BranchStatus(branch_name="main", remote_name="origin", commits_behind=2)

        with pytest.raises(BranchOutOfDateError) as exc_info:
            workflow.create_version("v1.0.0")

        assert exc_info.value.behind == 2
        provider.create_tag.assert_not_called()
        repository.push.assert_not_called()

    def test_behind_remote_forced(self, workflow, sync_engine, provider):
        """Should continue with force when behind."""
        sync_engine.status.return_value = BranchStatus(branch_name="main", remote_name="origin", commits_behind=2)

        result = workflow.create_version("v1.0.0", force=True)

        assert result.status.needs_pull
        provider.create_tag.assert_called_once()

    def test_pushes_unpushed_commits(self, workflow, sync_engine, repository):
        """Should push commits that are ahead."""
        sync_engine.status.return_value = BranchStatus(branch_name="main", remote_name="origin", commits_ahead=3)

        result = workflow.create_version("v1.0.0")

        repository.push.assert_called_once_with("origin", "main", set_upstream=False)
        assert result.pushed is True

    def test_new_branch_pushed_with_upstream(self, workflow, sync_engine, repository):
        """Should set the upstream when pushing a new branch."""
        sync_engine.status.return_value = BranchStatus(
            branch_name="feature", remote_name="origin", commits_ahead=4, is_new_branch=True
        )

        workflow.create_version("v1.0.0")

        repository.push.assert_called_once_with("origin", "feature", set_upstream=True)

    def test_skip_push(self, workflow, sync_engine, repository, provider):
        """Should not push with skip_push but still tag."""
        sync_engine.status.return_value = BranchStatus(branch_name="main", remote_name="origin", commits_ahead=1)

        result = workflow.create_version("v1.0.0", skip_push=True)

        repository.push.assert_not_called()
        provider.create_tag.assert_called_once()
        assert result.pushed is False

    def test_custom_remote(self, workflow, repository, sync_engine):
        """Should use the given remote for URL, status and push."""
        sync_engine.status.return_value = BranchStatus(branch_name="main", remote_name="upstream", commits_ahead=1)

        workflow.create_version("v1.0.0", remote="upstream")

        repository.remote_url.assert_called_once_with("upstream")
        sync_engine.status.assert_called_once_with("upstream")
        repository.push.assert_called_once_with("upstream", "main", set_upstream=False)

    def test_provider_failure(self, workflow, provider):
        """Should propagate provider errors."""
        provider.create_tag.side_effect = ProviderError("Failed to create tag", status_code=422)

        with pytest.raises(ProviderError):
            workflow.create_version("v1.0.0")

    def test_provider_closed_after_tagging(self, workflow, provider):
        """Should release the provider client once the tag exists."""
        workflow.create_version("v1.0.0")

        provider.__exit__.assert_called_once()

    def test_provider_closed_on_failure(self, workflow, provider):
        """Should release the provider client when tagging fails."""
        provider.create_tag.side_effect = ProviderError("Failed to create tag", status_code=422)

        with pytest.raises(ProviderError):
            workflow.create_version("v1.0.0")

        provider.__exit__.assert_called_once()
