"""Git operation exceptions.

All exceptions inherit from GitDiscoveryError and include helpful error
messages with hints for resolution.

Example:
    >>> from repo_broker.git.exceptions import NotAGitRepositoryError
    >>> raise NotAGitRepositoryError("/tmp/not-a-repo")
    Traceback (most recent call last):
        ...
    NotAGitRepositoryError: Not a Git repository: /tmp/not-a-repo

    Hint: Run 'git init' or navigate to a Git repository directory.
"""

from repo_broker.exceptions import GitOperationError


class GitDiscoveryError(GitOperationError):
    """Base exception for local Git errors.

    Attributes:
        message: Error message
        hint: Optional hint for resolution
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class NotAGitRepositoryError(GitDiscoveryError):
    """Raised when the directory is not inside a Git work tree.

    Attributes:
        path: Path that is not a Git repository
    """

    def __init__(self, path: str) -> None:
        super().__init__(
            message=f"Not a Git repository: {path}",
            hint="Run 'git init' or navigate to a Git repository directory.",
        )
        self.path = path


class RemoteQueryError(GitDiscoveryError):
    """Raised when a remote, branch or status query fails.

    Attributes:
        operation: Short name of the failed operation (e.g. 'remote_url')
    """

    def __init__(self, operation: str, detail: str, hint: str | None = None) -> None:
        super().__init__(message=f"Git {operation} failed: {detail}", hint=hint)
        self.operation = operation


class InvalidGitUrlError(GitDiscoveryError):
    """Raised when a remote URL format is not recognized.

    Attributes:
        url: The invalid URL
    """

    def __init__(self, url: str, reason: str | None = None) -> None:
        msg = f"Invalid Git URL format: {url}"
        if reason:
            msg += f" ({reason})"

        super().__init__(
            message=msg,
            hint=("Expected formats:\n" "  - git@github.com:owner/repo.git\n" "  - https://gitlab.com/owner/repo.git"),
        )
        self.url = url
