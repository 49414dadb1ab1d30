"""Base ABC for GitHub clients used by fork synchronization."""

from abc import ABC, abstractmethod
from typing import Any, Self


class ForkSyncClientBase(ABC):
    """Base ABC for GitHub clients bound to a single repository."""

    owner: str
    repo_name: str

    @property
    def full_name(self) -> str:
        """Return the bound repository as 'owner/repo'."""
        return f"{self.owner}/{self.repo_name}"

    @abstractmethod
    def for_repository(self, owner: str, repo_name: str) -> Self:
        """Return a client bound to another repository, sharing the same credentials."""
        pass

    # Repository operations
    @abstractmethod
    async def get_repository(self) -> Any:
        """Get the repository metadata (default branch, fork parent, ...)."""
        pass

    @abstractmethod
    async def get_file_content(self, file_path: str, ref: str | None = None) -> str:
        """Get the decoded text content of a file in the repository."""
        pass

    @abstractmethod
    async def compare_commits(self, basehead: str) -> Any:
        """Compare two commits, given as 'base...head' (each optionally 'owner:branch')."""
        pass

    # Git reference operations
    @abstractmethod
    async def get_ref(self, ref: str) -> Any:
        """Get a git reference such as 'heads/main'."""
        pass

    @abstractmethod
    async def create_ref(self, ref: str, sha: str) -> Any:
        """Create a fully-qualified git reference such as 'refs/heads/sync' pointing at sha."""
        pass

    @abstractmethod
    async def update_ref(self, ref: str, sha: str, force: bool = False) -> Any:
        """Point an existing git reference at sha."""
        pass

    @abstractmethod
    async def delete_ref(self, ref: str) -> None:
        """Delete a git reference such as 'heads/sync'."""
        pass

    # Pull request and issue operations
    @abstractmethod
    async def create_pull_request(self, title: str, head: str, base: str, body: str | None = None, **kwargs: Any) -> Any:
        """Create a pull request for the repository."""
        pass

    @abstractmethod
    async def create_issue(self, title: str, body: str | None = None, **kwargs: Any) -> Any:
        """Create an issue for the repository."""
        pass

    # Actions operations
    @abstractmethod
    async def list_repo_secrets(self) -> list[str]:
        """List the names of the repository's Actions secrets."""
        pass
