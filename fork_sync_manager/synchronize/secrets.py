"""Contains the check for Actions secrets that upstream has and the fork lacks.

GitHub only exposes secret names, never values, so missing secrets can be
reported but not copied.
"""

import structlog

from fork_sync_manager.github.abc import ForkSyncClientBase
from fork_sync_manager.schemas.sync_config import UpstreamRepository

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def find_missing_secrets(fork_adapter: ForkSyncClientBase, upstream: UpstreamRepository) -> list[str]:
    """Return the names of upstream's Actions secrets that the fork does not define.

    A failure to list either repository's secrets is logged as a warning and
    reported as no missing secrets.
    """
    upstream_adapter = fork_adapter.for_repository(upstream.owner, upstream.repo)
    try:
        upstream_names = await upstream_adapter.list_repo_secrets()
        fork_names = set(await fork_adapter.list_repo_secrets())
    except Exception as exc:
        logger.warning("Could not check repository secrets", repository=fork_adapter.full_name, upstream=upstream.full_name, error=str(exc))
        return []

    missing = [name for name in upstream_names if name not in fork_names]
    if missing:
        logger.warning(
            "Upstream secrets need manual sync; secret values cannot be read through the API",
            repository=fork_adapter.full_name,
            upstream=upstream.full_name,
            missing_secrets=missing,
        )
    return missing
