"""CLI commands for versions: create-version and versions."""

import click

from repo_broker.cli.common import credential_file, fail
from repo_broker.credentials.resolver import AccountResolver
from repo_broker.exceptions import RepoBrokerError
from repo_broker.git.local import LocalRepository
from repo_broker.providers.factory import provider_for_account
from repo_broker.release import ReleaseWorkflow


@click.command(name="create-version")
@click.argument("tag")
@click.option("--force", "-f", is_flag=True, help="Ignore uncommitted changes and an out-of-date branch")
@click.option("--skip-push", is_flag=True, help="Do not push unpushed commits before tagging")
@click.option("--remote", default=None, help="Remote identifying the hosted repository")
@click.pass_context
def create_version(ctx: click.Context, tag: str, force: bool, skip_push: bool, remote: str | None) -> None:
    """Create version TAG (vX.Y.Z) on the repository's hosting provider.

    The branch is pushed first when it has unpushed commits.

    Examples:

        broker create-version v1.2.0

        broker create-version v1.2.1 --force --skip-push
    """
    settings = ctx.obj["settings"]
    workflow = ReleaseWorkflow(
        LocalRepository(),
        credential_file(ctx),
        provider_factory=lambda account: provider_for_account(account, timeout=settings.http_timeout),
    )

    try:
        result = workflow.create_version(
            tag,
            force=force,
            skip_push=skip_push,
            remote=remote or settings.default_remote,
        )
    except RepoBrokerError as e:
        fail(e)

    status = result.status
    if status.fetch_failed:
        click.echo(click.style("Warning: could not fetch the remote; status uses cached refs", fg="yellow"))
    if status.needs_pull:
        click.echo(click.style(f"Warning: branch is {status.commits_behind} commit(s) behind", fg="yellow"))
    if result.pushed:
        click.echo(f"Pushed {status.commits_ahead} commit(s) to {status.remote_ref}")
    elif status.needs_push:
        click.echo(click.style("Push skipped; the tag points at the remote default branch", fg="yellow"))

    click.echo(click.style(f"Version {result.tag} created on {result.domain}/{result.repo_path}", fg="green"))
    click.echo(f"  Account: {result.account_name}")


@click.command(name="versions")
@click.argument("repo_path")
@click.option("--domain", default="github.com", show_default=True, help="Hosting domain")
@click.option("--account", "account_name", help="Account name (default: resolved from domain and owner)")
@click.pass_context
def list_versions(ctx: click.Context, repo_path: str, domain: str, account_name: str | None) -> None:
    """List the versions (tags) of OWNER/REPO."""
    settings = ctx.obj["settings"]
    try:
        store = credential_file(ctx).load()
        if account_name:
            account = store.get_account(account_name)
        else:
            owner = repo_path.split("/", 1)[0]
            account = AccountResolver().resolve_for_owner(store, domain, owner)

        with provider_for_account(account, timeout=settings.http_timeout) as provider:
            versions = provider.list_versions(repo_path)
    except RepoBrokerError as e:
        fail(e)

    if not versions:
        click.echo(click.style(f"No versions found for {repo_path}", fg="yellow"))
        return

    for version in versions:
        click.echo(f"{version.name}\t{version.date}" if version.date else version.name)
