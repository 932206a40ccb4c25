"""Shared utilities for repo-broker."""

from repo_broker.utils.logging_config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
