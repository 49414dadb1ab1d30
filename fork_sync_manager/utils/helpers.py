"""General utility functions and helper classes."""

from datetime import datetime, timezone

from fork_sync_manager.utils.constants import DEFAULT_SYNC_BRANCH_PREFIX


def generate_sync_branch_name(prefix: str = DEFAULT_SYNC_BRANCH_PREFIX, now: datetime | None = None) -> str:
    """Generate a sync branch name like 'fork-sync-20240101T120000123456Z'.

    The UTC timestamp carries microseconds, so two invocations only collide
    if they start within the same microsecond.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return f"{prefix}-{now.astimezone(timezone.utc).strftime('%Y%m%dT%H%M%S%fZ')}"
