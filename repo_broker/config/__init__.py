"""Configuration for repo-broker.

Example:
    >>> from repo_broker.config import BrokerSettings
    >>> settings = BrokerSettings.load()
    >>> settings.credential_path
    PosixPath('/home/me/.repo-broker/config.json')
"""

from repo_broker.config.settings import BrokerSettings, default_config_dir

__all__ = ["BrokerSettings", "default_config_dir"]
