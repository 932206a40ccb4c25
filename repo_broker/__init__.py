"""repo-broker: multi-account GitHub/GitLab credentials and version tagging."""

__version__ = "0.1.0"
