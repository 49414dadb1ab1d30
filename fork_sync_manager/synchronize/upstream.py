"""Compares a fork's branch with the default branch of its upstream repository."""

from typing import Any

import structlog

from fork_sync_manager.github.abc import ForkSyncClientBase
from fork_sync_manager.schemas.sync_config import UpstreamRepository
from fork_sync_manager.synchronize.exceptions import ComparisonError
from fork_sync_manager.synchronize.models import CommitSummary, ComparisonResult, ComparisonStatus

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

# GitHub reports the status of the head (upstream) relative to the base (fork).
FORK_STATUS_FROM_UPSTREAM_STATUS = {
    "identical": ComparisonStatus.IDENTICAL,
    "ahead": ComparisonStatus.BEHIND,
    "behind": ComparisonStatus.AHEAD,
    "diverged": ComparisonStatus.DIVERGED,
}


def build_cross_fork_basehead(fork_owner: str, upstream_owner: str, branch: str) -> str:
    """Build the compare API range from the fork's branch to the same branch upstream."""
    return f"{fork_owner}:{branch}...{upstream_owner}:{branch}"


def summarize_commit(commit: Any) -> CommitSummary:
    """Reduce a githubkit commit to its SHA and message."""
    return CommitSummary(sha=commit.sha, message=commit.commit.message)


async def compare_fork_with_upstream(fork_adapter: ForkSyncClientBase, upstream: UpstreamRepository) -> ComparisonResult:
    """Compute how far the fork's copy of the upstream default branch lags behind.

    The comparison runs on the upstream repository with the fork's branch as
    base and upstream's branch as head, then is re-expressed from the fork's
    side: behind_by counts upstream commits the fork lacks, ahead_by counts
    fork-only commits.

    Raises:
        ComparisonError: If the upstream metadata or the comparison cannot be fetched.
    """
    upstream_adapter = fork_adapter.for_repository(upstream.owner, upstream.repo)
    try:
        upstream_repository = await upstream_adapter.get_repository()
        base_branch: str = upstream_repository.default_branch
        comparison = await upstream_adapter.compare_commits(build_cross_fork_basehead(fork_adapter.owner, upstream.owner, base_branch))
        result = ComparisonResult(
            behind_by=comparison.ahead_by,
            ahead_by=comparison.behind_by,
            status=FORK_STATUS_FROM_UPSTREAM_STATUS[comparison.status],
            base_branch=base_branch,
            commits=[summarize_commit(commit) for commit in comparison.commits],
        )
    except Exception as exc:
        raise ComparisonError(f"Failed to compare fork with upstream: {exc}") from exc

    logger.debug(
        "Compared fork with upstream",
        fork=fork_adapter.full_name,
        upstream=upstream.full_name,
        base_branch=base_branch,
        behind_by=result.behind_by,
        ahead_by=result.ahead_by,
        status=result.status.value,
    )
    return result
