"""CLI command modules."""

from repo_broker.cli.accounts import list_accounts, login, logout
from repo_broker.cli.release import create_version, list_versions

__all__ = ["create_version", "list_accounts", "list_versions", "login", "logout"]
