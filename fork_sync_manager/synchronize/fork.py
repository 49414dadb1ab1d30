"""Contains logic for bringing a fork up to date with its upstream repository.

A sync attempt compares the fork with upstream, then either does nothing,
opens a pull request from a fresh branch pointing at upstream's head, or
force-moves the fork's branch to upstream's head. Each call is one complete
attempt; nothing is retried here.
"""

from typing import Any

import structlog

from fork_sync_manager.github.abc import ForkSyncClientBase
from fork_sync_manager.schemas.sync_config import SyncConfiguration, UpstreamRepository
from fork_sync_manager.synchronize.exceptions import SyncExecutionError
from fork_sync_manager.synchronize.models import ComparisonResult, SyncDecision, SyncOutcome
from fork_sync_manager.synchronize.upstream import compare_fork_with_upstream
from fork_sync_manager.utils.constants import DEFAULT_SYNC_BRANCH_PREFIX, SHORT_SHA_LENGTH
from fork_sync_manager.utils.helpers import generate_sync_branch_name
from fork_sync_manager.utils.templates import render_placeholders

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

UP_TO_DATE_MESSAGE = "Fork is already up to date"


async def decide_sync_action(configuration: SyncConfiguration, comparison: ComparisonResult) -> SyncDecision:
    """Decide whether a comparison calls for no action, a pull request, or a direct push."""
    if comparison.behind_by == 0:
        return SyncDecision.NOOP
    if configuration.create_pr:
        return SyncDecision.PULL_REQUEST
    return SyncDecision.DIRECT_PUSH


def format_commit_list(comparison: ComparisonResult) -> str:
    """Format the upstream commits as '- <short sha>: <subject>' lines."""
    return "\n".join(f"- {commit.sha[:SHORT_SHA_LENGTH]}: {commit.first_line}" for commit in comparison.commits)


def build_template_values(configuration: SyncConfiguration, comparison: ComparisonResult) -> dict[str, Any]:
    """Map each pull request template placeholder to its value for this sync."""
    return {
        "upstream": configuration.upstream,
        "branch": comparison.base_branch,
        "commits_behind": comparison.behind_by,
        "commit_list": format_commit_list(comparison),
    }


def render_pull_request_templates(configuration: SyncConfiguration, comparison: ComparisonResult) -> tuple[str, str]:
    """Render the configured (or default) pull request title and body."""
    values = build_template_values(configuration, comparison)
    return render_placeholders(configuration.pr_title, values), render_placeholders(configuration.pr_body, values)


async def resolve_upstream_head_sha(fork_adapter: ForkSyncClientBase, upstream: UpstreamRepository, branch: str) -> str:
    """Return the SHA upstream's branch currently points at."""
    upstream_adapter = fork_adapter.for_repository(upstream.owner, upstream.repo)
    upstream_ref = await upstream_adapter.get_ref(f"heads/{branch}")
    return upstream_ref.object_.sha


async def _delete_orphaned_sync_branch(fork_adapter: ForkSyncClientBase, sync_branch: str) -> None:
    """Remove a sync branch whose pull request could not be opened."""
    try:
        await fork_adapter.delete_ref(f"heads/{sync_branch}")
    except Exception as exc:
        logger.warning(
            "Failed to delete sync branch after pull request creation failed",
            repository=fork_adapter.full_name,
            sync_branch=sync_branch,
            error=str(exc),
        )


async def create_sync_pull_request(
    fork_adapter: ForkSyncClientBase,
    configuration: SyncConfiguration,
    comparison: ComparisonResult,
    branch_prefix: str = DEFAULT_SYNC_BRANCH_PREFIX,
) -> Any:
    """Open a pull request that brings upstream's commits into the fork.

    A new branch pointing at upstream's head is created in the fork and
    proposed against the base branch. If the pull request cannot be opened
    the new branch is deleted again.

    Raises:
        SyncExecutionError: If resolving the upstream head, creating the branch, or opening the pull request fails.
    """
    title, body = render_pull_request_templates(configuration, comparison)
    sync_branch = generate_sync_branch_name(branch_prefix)
    branch_created = False
    try:
        sha = await resolve_upstream_head_sha(fork_adapter, configuration.upstream_repository, comparison.base_branch)
        await fork_adapter.create_ref(f"refs/heads/{sync_branch}", sha)
        branch_created = True
        pull_request = await fork_adapter.create_pull_request(title=title, head=sync_branch, base=comparison.base_branch, body=body)
    except Exception as exc:
        if branch_created:
            await _delete_orphaned_sync_branch(fork_adapter, sync_branch)
        raise SyncExecutionError(f"Failed to create sync pull request: {exc}") from exc

    logger.info("Created sync pull request", repository=fork_adapter.full_name, pull_request_number=pull_request.number, sync_branch=sync_branch)
    return pull_request


async def perform_direct_sync(fork_adapter: ForkSyncClientBase, configuration: SyncConfiguration, comparison: ComparisonResult) -> str:
    """Force the fork's base branch to upstream's head and return the new SHA.

    This is a non-fast-forward update: commits that only exist on the fork's
    branch are dropped from it.

    Raises:
        SyncExecutionError: If resolving the upstream head or updating the fork's branch fails.
    """
    try:
        sha = await resolve_upstream_head_sha(fork_adapter, configuration.upstream_repository, comparison.base_branch)
        await fork_adapter.update_ref(f"heads/{comparison.base_branch}", sha, force=True)
    except Exception as exc:
        raise SyncExecutionError(f"Failed to perform direct sync: {exc}") from exc

    logger.info("Directly synced fork with upstream", repository=fork_adapter.full_name, branch=comparison.base_branch, sha=sha)
    return sha


async def execute_sync(
    fork_adapter: ForkSyncClientBase,
    configuration: SyncConfiguration,
    comparison: ComparisonResult,
    branch_prefix: str = DEFAULT_SYNC_BRANCH_PREFIX,
) -> SyncOutcome:
    """Act on a comparison: no-op, open a sync pull request, or push directly."""
    decision = await decide_sync_action(configuration, comparison)
    if decision == SyncDecision.NOOP:
        return SyncOutcome(success=True, message=UP_TO_DATE_MESSAGE, decision=decision)

    outcome = SyncOutcome(
        success=True,
        message=f"Successfully synced {comparison.behind_by} commits from upstream",
        commits_synced=comparison.behind_by,
        decision=decision,
    )
    if decision == SyncDecision.PULL_REQUEST:
        pull_request = await create_sync_pull_request(fork_adapter, configuration, comparison, branch_prefix=branch_prefix)
        outcome.pull_request_number = pull_request.number
        outcome.sync_branch = pull_request.head.ref
    else:
        await perform_direct_sync(fork_adapter, configuration, comparison)
    return outcome


async def sync_fork(
    fork_adapter: ForkSyncClientBase,
    configuration: SyncConfiguration,
    branch_prefix: str = DEFAULT_SYNC_BRANCH_PREFIX,
) -> SyncOutcome:
    """Compare the fork with its upstream and bring it up to date if it is behind."""
    logger.info("Starting sync process", repository=fork_adapter.full_name, upstream=configuration.upstream)
    try:
        comparison = await compare_fork_with_upstream(fork_adapter, configuration.upstream_repository)
        if comparison.behind_by == 0:
            logger.info("Fork is up to date with upstream", repository=fork_adapter.full_name)
        else:
            logger.info("Fork is behind upstream", repository=fork_adapter.full_name, behind_by=comparison.behind_by)
        return await execute_sync(fork_adapter, configuration, comparison, branch_prefix=branch_prefix)
    except Exception as exc:
        logger.error("Failed to sync fork", repository=fork_adapter.full_name, error=str(exc))
        raise
