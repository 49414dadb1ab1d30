"""GitHub client adapter for the githubkit library."""

import base64
from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import (
    CommitComparison,
    ContentFile,
    FullRepository,
    GitRef,
    Issue,
    PullRequest,
)

from fork_sync_manager.configuration.models import GitHubAuthenticationType
from fork_sync_manager.utils.github import split_repository
from fork_sync_manager.utils.retry import retry_on_rate_limit

from .abc import ForkSyncClientBase
from .client import GitHubClient, get_github_app_installation_client, get_github_pat_client, read_private_key

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def is_not_found(exc: BaseException) -> bool:
    """Return True if exc is a githubkit request failure with a 404 status."""
    return isinstance(exc, RequestFailed) and exc.response.status_code == 404


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code != 422:
                raise
            try:
                error_data = exc.response.json()
            except Exception:
                error_data = {}
            message = error_data.get("message", "Unprocessable Entity")
            errors = error_data.get("errors", [])
            logger.error(
                "GitHub 422 Unprocessable Entity",
                function=func.__name__,
                message=message,
                errors=errors,
                url=str(getattr(exc.response, "url", None)),
            )
            raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(ForkSyncClientBase):
    """GitHub client adapter for the githubkit library, bound to one repository."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            ValueError: If repo is not in 'owner/repo' format
            RuntimeError: If required parameters for the chosen auth type are missing
        """
        owner, repo_name = split_repository(repo)
        logger.info("Creating client for GitHub instance and repository", github_api_url=github_api_url, owner=owner, repo_name=repo_name)
        client: GitHubClient
        if github_auth_type == GitHubAuthenticationType.APP:
            if not (github_app_id and github_app_private_key_path and github_app_installation_id):
                raise RuntimeError("GitHub App authentication requires app_id, private_key_path, and installation_id in config.")
            client = await get_github_app_installation_client(
                github_app_id,
                read_private_key(github_app_private_key_path),
                github_app_installation_id,
                github_api_url,
            )
        else:
            client = await get_github_pat_client(github_pat_token or "", github_api_url)
        return cls(client, owner, repo_name)

    def for_repository(self, owner: str, repo_name: str) -> Self:
        """Return an adapter for another repository that reuses this adapter's client."""
        return type(self)(self.client, owner, repo_name)

    # Repository operations
    @retry_on_rate_limit()
    async def get_repository(self) -> FullRepository:
        """Get the repository for the current client."""
        response: Response[FullRepository] = await self.client.rest.repos.async_get(owner=self.owner, repo=self.repo_name)
        return response.parsed_data

    @retry_on_rate_limit()
    async def get_file_content(self, file_path: str, ref: str | None = None) -> str:
        """Get the decoded content of a file, optionally at a specific branch or commit."""
        params = self._omit_null_parameters(ref=ref)
        response = await self.client.rest.repos.async_get_content(owner=self.owner, repo=self.repo_name, path=file_path, **params)
        content = response.parsed_data
        if not isinstance(content, ContentFile):
            raise ValueError(f"'{file_path}' in {self.owner}/{self.repo_name} is not a regular file")
        return base64.b64decode(content.content).decode("utf-8")

    @retry_on_rate_limit()
    async def compare_commits(self, basehead: str) -> CommitComparison:
        """Compare two commits or branches, possibly across forks ('owner:branch...owner:branch')."""
        response: Response[CommitComparison] = await self.client.rest.repos.async_compare_commits(
            owner=self.owner,
            repo=self.repo_name,
            basehead=basehead,
        )
        return response.parsed_data

    # Git reference operations
    @retry_on_rate_limit()
    async def get_ref(self, ref: str) -> GitRef:
        """Get a git reference such as 'heads/main'."""
        response: Response[GitRef] = await self.client.rest.git.async_get_ref(owner=self.owner, repo=self.repo_name, ref=ref)
        return response.parsed_data

    @handle_github_422
    @retry_on_rate_limit()
    async def create_ref(self, ref: str, sha: str) -> GitRef:
        """Create a fully-qualified git reference such as 'refs/heads/fork-sync-...'."""
        response: Response[GitRef] = await self.client.rest.git.async_create_ref(owner=self.owner, repo=self.repo_name, ref=ref, sha=sha)
        logger.info("Created git reference", repository=self.full_name, ref=ref, sha=sha)
        return response.parsed_data

    @handle_github_422
    @retry_on_rate_limit()
    async def update_ref(self, ref: str, sha: str, force: bool = False) -> GitRef:
        """Point an existing git reference at sha; force allows non-fast-forward updates."""
        response: Response[GitRef] = await self.client.rest.git.async_update_ref(
            owner=self.owner,
            repo=self.repo_name,
            ref=ref,
            sha=sha,
            force=force,
        )
        logger.info("Updated git reference", repository=self.full_name, ref=ref, sha=sha, force=force)
        return response.parsed_data

    @retry_on_rate_limit()
    async def delete_ref(self, ref: str) -> None:
        """Delete a git reference such as 'heads/fork-sync-...'."""
        await self.client.rest.git.async_delete_ref(owner=self.owner, repo=self.repo_name, ref=ref)
        logger.info("Deleted git reference", repository=self.full_name, ref=ref)

    # Pull request and issue operations
    @handle_github_422
    @retry_on_rate_limit()
    async def create_pull_request(
        self,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
        draft: bool | None = None,
        maintainer_can_modify: bool | None = None,
        **kwargs: Any,
    ) -> PullRequest:
        """Create a pull request for a repository."""
        params = self._omit_null_parameters(
            title=title,
            head=head,
            base=base,
            body=body,
            draft=draft,
            maintainer_can_modify=maintainer_can_modify,
            **kwargs,
        )
        response: Response[PullRequest] = await self.client.rest.pulls.async_create(
            owner=self.owner,
            repo=self.repo_name,
            **params,
        )
        return response.parsed_data

    @handle_github_422
    @retry_on_rate_limit()
    async def create_issue(
        self,
        title: str,
        body: str | None = None,
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
        **kwargs: Any,
    ) -> Issue:
        """Create an issue for a repository."""
        params = self._omit_null_parameters(
            title=title,
            body=body,
            assignees=assignees,
            labels=labels,  # type: ignore
            **kwargs,
        )
        response: Response[Issue] = await self.client.rest.issues.async_create(
            owner=self.owner,
            repo=self.repo_name,
            **params,
        )
        return response.parsed_data

    # Actions operations
    @retry_on_rate_limit()
    async def list_repo_secrets(self) -> list[str]:
        """List the names of the repository's Actions secrets. Secret values are never returned by GitHub."""
        names: list[str] = []
        page = 1
        while True:
            response = await self.client.rest.actions.async_list_repo_secrets(
                owner=self.owner,
                repo=self.repo_name,
                per_page=100,
                page=page,
            )
            secrets = response.parsed_data.secrets
            names.extend(secret.name for secret in secrets)
            if not secrets or len(names) >= response.parsed_data.total_count:
                return names
            page += 1
