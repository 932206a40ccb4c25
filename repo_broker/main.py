"""CLI entry point for repo-broker."""

import click
import structlog

from repo_broker import __version__
from repo_broker.cli import create_version, list_accounts, list_versions, login, logout
from repo_broker.cli.common import fail
from repo_broker.config.settings import BrokerSettings
from repo_broker.credentials.keys import KeyProvider
from repo_broker.credentials.store import CredentialFile
from repo_broker.exceptions import ConfigurationError
from repo_broker.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: WARNING)")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Configuration directory (default: ~/.repo-broker)",
)
@click.version_option(__version__, prog_name="broker")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, config_dir: str | None) -> None:
    """repo-broker: multi-account GitHub/GitLab credentials and version tagging."""
    # Settings may set the level too; until they load, honour the option alone
    configure_logging(log_level or "WARNING")

    overrides = {"log_level": log_level} if log_level else {}
    try:
        settings = BrokerSettings.load(config_dir, **overrides)
    except ConfigurationError as e:
        fail(e)

    configure_logging(settings.log_level)
    log.debug("settings_loaded", config_dir=str(settings.config_dir))

    # One key provider per process so the secret store is queried at most once
    key_provider = KeyProvider(settings.keyring_service, settings.keyring_key_name)
    ctx.obj = {
        "settings": settings,
        "key_provider": key_provider,
        "credential_file": CredentialFile(settings.credential_path, key_provider),
    }


cli.add_command(login)
cli.add_command(logout)
cli.add_command(list_accounts)
cli.add_command(create_version)
cli.add_command(list_versions)


if __name__ == "__main__":
    cli()
