"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_CONFIG_FILE_PATH,
    DEFAULT_PULL_REQUEST_BODY,
    DEFAULT_PULL_REQUEST_TITLE,
    DEFAULT_SYNC_BRANCH_PREFIX,
    DEFAULT_SYNC_BRANCHES,
)
from .retry import retry_on_rate_limit

__all__ = [
    "DEFAULT_CONFIG_FILE_PATH",
    "DEFAULT_PULL_REQUEST_BODY",
    "DEFAULT_PULL_REQUEST_TITLE",
    "DEFAULT_SYNC_BRANCH_PREFIX",
    "DEFAULT_SYNC_BRANCHES",
    "retry_on_rate_limit",
]
