"""Custom exception hierarchy for repo-broker.

This module defines a structured exception hierarchy that enables precise
error handling and user-friendly error messages across the credential
store, the account resolver, the branch sync engine and the release
workflow.

Exception Hierarchy:
    RepoBrokerError (base)
    ├── ConfigurationError
    │   └── ConfigIOError
    ├── CredentialError
    │   ├── CryptoError
    │   └── AccountNotFoundError
    ├── GitOperationError
    │   (see repo_broker.git.exceptions)
    ├── ProviderError
    │   └── UnsupportedProviderError
    └── ReleaseError
        ├── InvalidVersionError
        ├── UncommittedChangesError
        └── BranchOutOfDateError

Example Usage:
    >>> from repo_broker.exceptions import ConfigIOError
    >>> try:
    ...     data = path.read_text()
    ... except OSError as e:
    ...     raise ConfigIOError(f"Cannot read credential file: {path}") from e
"""


class RepoBrokerError(Exception):
    """Base exception for all repo-broker errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(RepoBrokerError):
    """Configuration-related errors.

    Raised when tool settings are invalid or cannot be loaded.
    """

    pass


class ConfigIOError(ConfigurationError):
    """The credential file could not be read, parsed or written."""

    pass


class CredentialError(RepoBrokerError):
    """Credential-related errors.

    Base class for key, encryption and account lookup failures.

    Attributes:
        message: Human-readable error description
        reference: The account or key reference that failed
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The account or key reference that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class CryptoError(CredentialError):
    """Key unavailable, or token encryption/decryption failed."""

    pass


class AccountNotFoundError(CredentialError):
    """No account matches the requested name, domain or owner.

    Also raised when the store is empty, or when several accounts exist and
    the caller did not say which one to use.

    Attributes:
        domain: Domain that was looked up (if any)
        owner: Owner that was looked up (if any)
    """

    def __init__(
        self,
        message: str,
        domain: str | None = None,
        owner: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            domain: Domain that was looked up
            owner: Owner that was looked up
            suggestion: Optional suggestion for resolution
        """
        self.domain = domain
        self.owner = owner
        reference = None
        if domain:
            reference = f"{domain}/{owner}" if owner else domain
        super().__init__(message, reference=reference, suggestion=suggestion)


class GitOperationError(RepoBrokerError):
    """Git operation errors.

    Base class for local repository failures. See repo_broker.git.exceptions
    for the specific types:
    - NotAGitRepositoryError: Directory is not inside a Git work tree
    - RemoteQueryError: A remote/branch/status query failed
    - InvalidGitUrlError: Remote URL format not recognized
    """

    pass


class ProviderError(RepoBrokerError):
    """Hosting provider API errors.

    Raised when a provider call (token validation, tag listing, tag
    creation) fails.

    Attributes:
        status_code: HTTP status code (if applicable)
        response_text: Response body text (if applicable)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response_text: Response body text (if applicable)
        """
        self.status_code = status_code
        self.response_text = response_text

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        self.message = message


class UnsupportedProviderError(ProviderError):
    """Provider tag does not name a supported provider kind."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider} (use 'github' or 'gitlab')")


class ReleaseError(RepoBrokerError):
    """Release workflow refused to create a version.

    Attributes:
        suggestion: Optional suggestion for resolution
    """

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.suggestion = suggestion
        super().__init__(message)


class InvalidVersionError(ReleaseError):
    """Tag is not a vX.Y.Z semantic version."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(
            f"Invalid version format: {tag}",
            suggestion="Use the format vX.Y.Z (for example v1.0.0)",
        )


class UncommittedChangesError(ReleaseError):
    """Working tree has uncommitted changes."""

    def __init__(self) -> None:
        super().__init__(
            "There are uncommitted changes",
            suggestion="Commit your changes or pass --force",
        )


class BranchOutOfDateError(ReleaseError):
    """Local branch is behind its remote counterpart.

    Attributes:
        branch: Local branch name
        remote: Remote name
        behind: Number of remote commits missing locally
    """

    def __init__(self, branch: str, remote: str, behind: int) -> None:
        self.branch = branch
        self.remote = remote
        self.behind = behind
        super().__init__(
            f"Branch '{branch}' is {behind} commit(s) behind {remote}",
            suggestion="Run 'git pull' before creating the version, or pass --force",
        )
