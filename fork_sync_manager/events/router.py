"""Routes GitHub webhook events to the fork sync pipeline.

The router does not receive HTTP requests itself; a host (a web framework,
a GitHub Actions step, a queue consumer) hands it already-parsed event names
and payloads.
"""

from typing import Any, Awaitable, Callable

import structlog

from fork_sync_manager.events.boundary import error_boundary
from fork_sync_manager.events.models import (
    ForkEventPayload,
    InstallationEventPayload,
    InstallationRepositoriesEventPayload,
    PullRequestEventPayload,
    PushEventPayload,
    RepositoryPayload,
)
from fork_sync_manager.github.adapter import GitHubKitAdapter
from fork_sync_manager.github.client import ClientFactory
from fork_sync_manager.synchronize.config_loader import load_sync_configuration
from fork_sync_manager.synchronize.driver import run_repository_sync
from fork_sync_manager.synchronize.locks import RepositorySyncLocks
from fork_sync_manager.synchronize.models import SyncOutcome
from fork_sync_manager.utils.constants import (
    DEFAULT_CONFIG_FILE_PATH,
    DEFAULT_SYNC_BRANCH_PREFIX,
    WELCOME_ISSUE_TEMPLATE_NAME,
    WELCOME_ISSUE_TITLE,
)
from fork_sync_manager.utils.templates import render_package_template

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

EventHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class EventRouter:
    """Dispatches webhook events to handlers, one error boundary per event."""

    def __init__(
        self,
        client_factory: ClientFactory,
        locks: RepositorySyncLocks | None = None,
        config_path: str = DEFAULT_CONFIG_FILE_PATH,
        branch_prefix: str = DEFAULT_SYNC_BRANCH_PREFIX,
    ) -> None:
        """Initialize the router.

        Args:
            client_factory: Returns an authenticated client for an installation ID.
            locks: Lease registry shared by every event this router handles.
            config_path: Path of the sync configuration file in each repository.
            branch_prefix: Prefix of branches created for sync pull requests.
        """
        self.client_factory = client_factory
        self.locks = locks if locks is not None else RepositorySyncLocks()
        self.config_path = config_path
        self.branch_prefix = branch_prefix
        self.handlers: dict[str, EventHandler] = {
            "installation.created": self.handle_installation_created,
            "installation_repositories.added": self.handle_installation_repositories_added,
            "push": self.handle_push,
            "pull_request.opened": self.handle_pull_request_opened,
            "fork": self.handle_fork,
        }

    def resolve_handler(self, event_name: str, payload: dict[str, Any]) -> EventHandler | None:
        """Find the handler for '<event>.<action>', falling back to '<event>'."""
        action = payload.get("action")
        if action:
            handler = self.handlers.get(f"{event_name}.{action}")
            if handler is not None:
                return handler
        return self.handlers.get(event_name)

    async def dispatch(self, event_name: str, payload: dict[str, Any]) -> Any:
        """Handle one event. Failures are logged by the handler's error boundary and never raised."""
        handler = self.resolve_handler(event_name, payload)
        if handler is None:
            logger.debug("Ignoring unhandled event", webhook_event=event_name, action=payload.get("action"))
            return None
        return await handler(payload)

    async def adapter_for(self, repository: RepositoryPayload, installation_id: int | None) -> GitHubKitAdapter:
        """Build an adapter for a repository named in an event payload."""
        client = await self.client_factory(installation_id)
        return GitHubKitAdapter(client, repository.owner_login, repository.name)

    @error_boundary("installation.created")
    async def handle_installation_created(self, payload: dict[str, Any]) -> None:
        """Log a new installation of the GitHub App."""
        event = InstallationEventPayload.model_validate(payload)
        account = event.installation.account.login if event.installation and event.installation.account else None
        logger.info("GitHub App installed", account=account, installation_id=event.installation_id)

    @error_boundary("installation_repositories.added")
    async def handle_installation_repositories_added(self, payload: dict[str, Any]) -> None:
        """Log repositories added to an existing installation."""
        event = InstallationRepositoriesEventPayload.model_validate(payload)
        logger.info("Repositories added to installation", installation_id=event.installation_id, count=len(event.repositories_added))
        for repository in event.repositories_added:
            logger.info("Now monitoring repository", repository=repository.full_name)

    @error_boundary("push")
    async def handle_push(self, payload: dict[str, Any]) -> SyncOutcome | None:
        """Sync a fork after a push to one of its configured branches."""
        event = PushEventPayload.model_validate(payload)
        logger.info("Push event received", repository=event.repository.full_name, ref=event.ref)
        github_adapter = await self.adapter_for(event.repository, event.installation_id)
        outcome = await run_repository_sync(
            github_adapter,
            is_fork=event.repository.fork,
            ref=event.ref,
            locks=self.locks,
            config_path=self.config_path,
            branch_prefix=self.branch_prefix,
        )
        if outcome is not None:
            logger.info("Sync finished", repository=event.repository.full_name, message=outcome.message, commits_synced=outcome.commits_synced)
        return outcome

    @error_boundary("pull_request.opened")
    async def handle_pull_request_opened(self, payload: dict[str, Any]) -> None:
        """Note pull requests opened in configured forks.

        Conflict detection against upstream is not performed; the event is
        only logged.
        """
        event = PullRequestEventPayload.model_validate(payload)
        logger.info("Pull request opened", repository=event.repository.full_name, pull_request_number=event.pull_request.number)
        github_adapter = await self.adapter_for(event.repository, event.installation_id)
        if await load_sync_configuration(github_adapter, self.config_path) is None:
            return
        if event.repository.fork:
            logger.info(
                "Pull request in configured fork, upstream conflict checking is not performed",
                repository=event.repository.full_name,
                pull_request_number=event.pull_request.number,
            )

    @error_boundary("fork")
    async def handle_fork(self, payload: dict[str, Any]) -> Any:
        """Open a welcome issue in a new fork explaining how to enable sync."""
        event = ForkEventPayload.model_validate(payload)
        logger.info("Repository was forked", repository=event.repository.full_name, fork=event.forkee.full_name)
        body = render_package_template(WELCOME_ISSUE_TEMPLATE_NAME, upstream=event.repository.full_name, config_path=self.config_path)
        github_adapter = await self.adapter_for(event.forkee, event.installation_id)
        try:
            issue = await github_adapter.create_issue(title=WELCOME_ISSUE_TITLE, body=body)
        except Exception as exc:
            logger.error("Failed to create welcome issue", fork=event.forkee.full_name, error=str(exc))
            return None
        logger.info("Created welcome issue", fork=event.forkee.full_name, issue_number=issue.number)
        return issue
