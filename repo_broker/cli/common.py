"""Shared helpers for CLI commands."""

import sys
from typing import NoReturn

import click
import structlog

from repo_broker.credentials.store import CredentialFile
from repo_broker.exceptions import RepoBrokerError

log = structlog.get_logger(__name__)


def fail(error: RepoBrokerError) -> NoReturn:
    """Print an error (and any suggestion or hint) and exit with status 1."""
    click.echo(click.style(f"Error: {error.message}", fg="red"), err=True)
    suggestion = getattr(error, "suggestion", None) or getattr(error, "hint", None)
    if suggestion:
        click.echo(click.style(f"Suggestion: {suggestion}", fg="yellow"), err=True)
    log.debug("command_failed", error_type=type(error).__name__, exc_info=True)
    sys.exit(1)


def credential_file(ctx: click.Context) -> CredentialFile:
    """Credential file shared by every command of this invocation."""
    file: CredentialFile = ctx.obj["credential_file"]
    return file
