"""Pydantic schema for the sync configuration file stored in a fork."""

from pydantic import BaseModel, ConfigDict, Field

from fork_sync_manager.utils.constants import (
    DEFAULT_PULL_REQUEST_BODY,
    DEFAULT_PULL_REQUEST_TITLE,
    DEFAULT_SYNC_BRANCHES,
)
from fork_sync_manager.utils.github import split_repository


class UpstreamRepository(BaseModel):
    """Owner and name of the repository a fork is kept in sync with."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        """Return the repository as 'owner/repo'."""
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_identifier(cls, identifier: str) -> "UpstreamRepository":
        """Parse an 'owner/repo' identifier."""
        owner, repo = split_repository(identifier)
        return cls(owner=owner, repo=repo)


class SyncConfiguration(BaseModel):
    """Pydantic model for a repository's sync preferences.

    Field names are the keys of the YAML configuration file.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    auto_sync: bool
    upstream: str
    branches: list[str] = Field(default_factory=lambda: list(DEFAULT_SYNC_BRANCHES))
    create_pr: bool = True
    pr_title: str = DEFAULT_PULL_REQUEST_TITLE
    pr_body: str = DEFAULT_PULL_REQUEST_BODY

    @property
    def upstream_repository(self) -> UpstreamRepository:
        """Return the upstream identifier as an owner/repo pair."""
        return UpstreamRepository.from_identifier(self.upstream)
