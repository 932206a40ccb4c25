"""CLI commands for account management.

Commands:
    - login: Validate a token against a provider and store it as an account
    - logout: Remove one account, or all of them (optionally with the key)
    - accounts: List stored accounts with masked tokens

Example:
    Keep a scoped work account next to a personal one::

        $ broker login --provider github --url https://github.com --token <PAT> --name personal
        $ broker login --provider github --url https://github.com --token <PAT> \\
            --name work --owners my-company,company-tools
        $ broker accounts
"""

import click

from repo_broker.cli.common import credential_file, fail
from repo_broker.credentials.keys import KeyProvider
from repo_broker.credentials.models import Account
from repo_broker.enums import ProviderType
from repo_broker.exceptions import RepoBrokerError
from repo_broker.providers.factory import create_provider


def _parse_owners(owners: str | None) -> list[str]:
    if not owners:
        return []
    return [owner.strip() for owner in owners.split(",") if owner.strip()]


def _describe(account: Account) -> None:
    click.echo(click.style(account.name, fg="cyan", bold=True))
    click.echo(f"  Provider: {account.provider}")
    click.echo(f"  Domain:   {account.domain}")
    click.echo(f"  API:      {account.api_url}")
    owners = ", ".join(account.owners) if account.owners else "* (all)"
    click.echo(f"  Owners:   {owners}")


def _purge_key(ctx: click.Context) -> None:
    key_provider: KeyProvider = ctx.obj["key_provider"]
    if key_provider.forget_key():
        click.echo(click.style("Encryption key deleted from the OS keyring", fg="green"))
    else:
        click.echo("No encryption key stored in the OS keyring")


@click.command(name="login")
@click.option(
    "--provider",
    "-p",
    type=click.Choice([p.value for p in ProviderType]),
    required=True,
    help="Hosting provider",
)
@click.option("--url", "-u", required=True, help="Web URL of the instance (e.g. https://gitlab.com)")
@click.option(
    "--token",
    "-t",
    prompt=True,
    hide_input=True,
    help="Personal access token (will prompt if not provided)",
)
@click.option("--name", "-n", help="Account name (default: <provider>-<username>)")
@click.option("--owners", "-o", help="Comma-separated users/organizations this account handles")
@click.pass_context
def login(
    ctx: click.Context,
    provider: str,
    url: str,
    token: str,
    name: str | None,
    owners: str | None,
) -> None:
    """Authenticate against a GitHub or GitLab instance and save the account.

    Without --owners the account handles every repository on its domain.

    Examples:

        broker login --provider gitlab --url https://gitlab.com --token <PAT>

        broker login -p github -u https://github.com --name work --owners my-company
    """
    settings = ctx.obj["settings"]
    try:
        with create_provider(provider, url, token, timeout=settings.http_timeout) as client:
            username = client.validate_token()

        account = Account(
            name=name or f"{provider}-{username}",
            provider=ProviderType(provider),
            api_url=client.api_url,
            domain=url.strip(),
            token=token.strip(),
            owners=_parse_owners(owners),
        )

        file = credential_file(ctx)
        store = file.load()
        store.add_account(account)
        file.save(store)
    except RepoBrokerError as e:
        fail(e)

    click.echo(click.style(f"Account '{account.name}' saved (authenticated as {username})", fg="green"))
    _describe(account)


@click.command(name="logout")
@click.argument("name", required=False)
@click.option("--all", "-a", "remove_all", is_flag=True, help="Remove every account")
@click.option("--force", "-f", is_flag=True, help="Do not ask for confirmation")
@click.option("--purge-key", is_flag=True, help="With --all, also delete the encryption key from the OS keyring")
@click.pass_context
def logout(ctx: click.Context, name: str | None, remove_all: bool, force: bool, purge_key: bool) -> None:
    """Remove a stored account.

    Examples:

        broker logout work

        broker logout --all --force --purge-key
    """
    if purge_key and not remove_all:
        raise click.UsageError("--purge-key requires --all")

    file = credential_file(ctx)
    try:
        store = file.load()
        if len(store) == 0:
            click.echo(click.style("No accounts configured", fg="yellow"))
            if purge_key:
                _purge_key(ctx)
            return

        if remove_all:
            if not force and not click.confirm(f"Remove ALL accounts ({len(store)})?"):
                click.echo(click.style("Cancelled", fg="yellow"))
                return
            count = store.clear()
            file.save(store)
            click.echo(click.style(f"{count} account(s) removed", fg="green"))
            if purge_key:
                _purge_key(ctx)
            return

        if not name:
            click.echo(click.style("Specify the account to remove:", fg="yellow"))
            for account in store.list_accounts():
                click.echo(f"  - {account.name} ({account.provider} - {account.domain})")
            click.echo("Usage: broker logout NAME  or  broker logout --all")
            return

        account = store.get_account(name)
        if not force:
            _describe(account)
            if not click.confirm("Remove this account?"):
                click.echo(click.style("Cancelled", fg="yellow"))
                return

        store.remove_account(name)
        file.save(store)
    except RepoBrokerError as e:
        fail(e)

    click.echo(click.style(f"Account '{name}' removed", fg="green"))
    if len(store) == 0:
        click.echo("No accounts left. Use 'broker login' to add one.")


@click.command(name="accounts")
@click.pass_context
def list_accounts(ctx: click.Context) -> None:
    """List stored accounts (tokens masked)."""
    try:
        store = credential_file(ctx).load()
    except RepoBrokerError as e:
        fail(e)

    if len(store) == 0:
        click.echo(click.style("No accounts configured", fg="yellow"))
        click.echo("Use 'broker login' to add one.")
        return

    for account in store.list_accounts():
        _describe(account)
        click.echo(f"  Token:    {account.masked_token}")
