"""Loads the sync configuration file from a repository."""

from typing import Any

import structlog

from fork_sync_manager.github.abc import ForkSyncClientBase
from fork_sync_manager.github.adapter import is_not_found
from fork_sync_manager.synchronize.exceptions import ConfigLoadError
from fork_sync_manager.utils.constants import DEFAULT_CONFIG_FILE_PATH
from fork_sync_manager.utils.yaml import load_yaml_text

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def load_sync_configuration(github_adapter: ForkSyncClientBase, config_path: str = DEFAULT_CONFIG_FILE_PATH) -> Any:
    """Fetch and parse the configuration file of the adapter's repository.

    The file is fetched again on every call. A missing file is the normal
    "sync not configured" case and returns None, as does an empty file. The
    parsed document is returned unvalidated.

    Raises:
        ConfigLoadError: If the file exists but cannot be fetched, decoded or parsed.
    """
    try:
        content = await github_adapter.get_file_content(config_path)
        return load_yaml_text(content)
    except Exception as exc:
        if is_not_found(exc):
            logger.debug("No sync configuration file found", repository=github_adapter.full_name, config_path=config_path)
            return None
        raise ConfigLoadError(f"Failed to load {config_path}: {exc}") from exc
