"""Orchestrates the load, validate, compare and sync pipeline for one repository."""

import structlog

from fork_sync_manager.github.abc import ForkSyncClientBase
from fork_sync_manager.schemas.sync_config import SyncConfiguration
from fork_sync_manager.synchronize.config_loader import load_sync_configuration
from fork_sync_manager.synchronize.exceptions import ForkSyncError, InvalidSyncConfigurationError
from fork_sync_manager.synchronize.fork import decide_sync_action, sync_fork
from fork_sync_manager.synchronize.locks import RepositorySyncLocks
from fork_sync_manager.synchronize.models import SyncDecision, SyncOutcome, ValidationResult
from fork_sync_manager.synchronize.secrets import find_missing_secrets
from fork_sync_manager.synchronize.upstream import compare_fork_with_upstream
from fork_sync_manager.synchronize.validation import parse_sync_configuration, validate_sync_configuration
from fork_sync_manager.utils.constants import DEFAULT_CONFIG_FILE_PATH, DEFAULT_SYNC_BRANCH_PREFIX
from fork_sync_manager.utils.github import branch_from_ref

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def load_and_validate_sync_configuration(
    github_adapter: ForkSyncClientBase,
    config_path: str = DEFAULT_CONFIG_FILE_PATH,
) -> tuple[SyncConfiguration | None, ValidationResult | None]:
    """Load the repository's configuration file and validate it.

    Returns (None, None) when there is no configuration, (None, result) when
    it is invalid, and (configuration, result) when it can be acted upon.
    """
    raw_configuration = await load_sync_configuration(github_adapter, config_path)
    if raw_configuration is None:
        return None, None
    validation = validate_sync_configuration(raw_configuration)
    if not validation.valid:
        return None, validation
    return parse_sync_configuration(raw_configuration), validation


async def run_repository_sync(
    github_adapter: ForkSyncClientBase,
    is_fork: bool,
    ref: str | None = None,
    locks: RepositorySyncLocks | None = None,
    config_path: str = DEFAULT_CONFIG_FILE_PATH,
    branch_prefix: str = DEFAULT_SYNC_BRANCH_PREFIX,
) -> SyncOutcome | None:
    """Run the webhook-driven sync pipeline for a repository.

    Returns None whenever the pipeline stops before syncing: no or invalid
    configuration, a pushed ref outside the configured branches, a repository
    that is not a fork, auto_sync disabled, or a sync already in progress.
    """
    repository = github_adapter.full_name
    configuration, validation = await load_and_validate_sync_configuration(github_adapter, config_path)
    if validation is None:
        logger.debug("No sync configuration found, skipping", repository=repository, config_path=config_path)
        return None
    if configuration is None:
        logger.error("Invalid sync configuration", repository=repository, errors=validation.errors)
        return None

    if ref is not None:
        branch = branch_from_ref(ref)
        if branch not in configuration.branches:
            logger.debug("Pushed ref is not a sync branch, skipping", repository=repository, ref=ref, branches=configuration.branches)
            return None

    if not is_fork or not configuration.auto_sync:
        logger.debug("Auto-sync not applicable", repository=repository, is_fork=is_fork, auto_sync=configuration.auto_sync)
        return None

    logger.info("Auto-sync enabled for fork", repository=repository, upstream=configuration.upstream)
    if locks is None:
        return await sync_fork(github_adapter, configuration, branch_prefix=branch_prefix)
    async with locks.try_acquire(repository) as acquired:
        if not acquired:
            return None
        return await sync_fork(github_adapter, configuration, branch_prefix=branch_prefix)


async def detect_upstream_repository(github_adapter: ForkSyncClientBase) -> str:
    """Return the full name of the repository the adapter's repository was forked from.

    Raises:
        ForkSyncError: If the repository is not a fork or GitHub reports no parent.
    """
    repository = await github_adapter.get_repository()
    if not repository.fork or not repository.parent:
        raise ForkSyncError("Could not auto-detect upstream repository. Please specify the upstream repository explicitly.")
    upstream: str = repository.parent.full_name
    logger.info("Auto-detected upstream repository", repository=github_adapter.full_name, upstream=upstream)
    return upstream


async def resolve_action_configuration(
    github_adapter: ForkSyncClientBase,
    upstream: str | None = None,
    create_pr: bool | None = None,
    config_path: str = DEFAULT_CONFIG_FILE_PATH,
) -> SyncConfiguration:
    """Combine the repository's configuration file with command line overrides.

    Without a configuration file, the command line input alone describes the
    sync and the upstream defaults to the fork's parent.

    Raises:
        InvalidSyncConfigurationError: If the configuration file exists but is invalid.
        ForkSyncError: If no upstream is configured and none can be detected.
    """
    configuration, validation = await load_and_validate_sync_configuration(github_adapter, config_path)
    if validation is not None and configuration is None:
        raise InvalidSyncConfigurationError(validation.errors)

    if configuration is None:
        configuration = SyncConfiguration(
            auto_sync=True,
            upstream=upstream or await detect_upstream_repository(github_adapter),
        )
    elif upstream:
        configuration = configuration.model_copy(update={"upstream": upstream})

    if create_pr is not None:
        configuration = configuration.model_copy(update={"create_pr": create_pr})
    return configuration


async def run_action_sync(
    github_adapter: ForkSyncClientBase,
    upstream: str | None = None,
    create_pr: bool | None = None,
    dry_run: bool = False,
    check_secrets: bool = False,
    config_path: str = DEFAULT_CONFIG_FILE_PATH,
    branch_prefix: str = DEFAULT_SYNC_BRANCH_PREFIX,
) -> SyncOutcome:
    """Run the workflow-driven sync for one fork.

    An explicit run ignores the pushed-branch filter but still honours
    auto_sync: false in a configuration file. A dry run compares and reports
    the decision without changing anything. With check_secrets, upstream
    Actions secrets missing from the fork are reported on the outcome.
    """
    configuration = await resolve_action_configuration(github_adapter, upstream=upstream, create_pr=create_pr, config_path=config_path)
    if not configuration.auto_sync:
        logger.info("Sync disabled by configuration", repository=github_adapter.full_name)
        return SyncOutcome(success=True, message="Sync disabled by configuration (auto_sync is false)", decision=SyncDecision.SKIPPED)

    if dry_run:
        outcome = await preview_sync(github_adapter, configuration)
    else:
        outcome = await sync_fork(github_adapter, configuration, branch_prefix=branch_prefix)
    if check_secrets:
        outcome.missing_secrets = await find_missing_secrets(github_adapter, configuration.upstream_repository)
    return outcome


async def preview_sync(github_adapter: ForkSyncClientBase, configuration: SyncConfiguration) -> SyncOutcome:
    """Compare with upstream and describe the sync action without performing it."""
    comparison = await compare_fork_with_upstream(github_adapter, configuration.upstream_repository)
    decision = await decide_sync_action(configuration, comparison)
    if decision == SyncDecision.NOOP:
        message = "Dry run: fork is already up to date"
    elif decision == SyncDecision.PULL_REQUEST:
        message = f"Dry run: would open a pull request syncing {comparison.behind_by} commits from upstream"
    else:
        message = f"Dry run: would push {comparison.behind_by} commits from upstream directly to {comparison.base_branch}"
    logger.info(message, repository=github_adapter.full_name, upstream=configuration.upstream, behind_by=comparison.behind_by)
    return SyncOutcome(success=True, message=message, decision=decision, dry_run=True)
