"""Contains utility functions for GitHub interactions."""

from typing import Any

BRANCH_REF_PREFIX = "refs/heads/"


def is_repository_identifier(value: Any) -> bool:
    """Return True if value is an 'owner/repo' string with exactly one separator and two non-empty parts."""
    if not isinstance(value, str):
        return False
    parts = value.split("/")
    return len(parts) == 2 and all(parts)


def split_repository(repo: str | None) -> tuple[str, str]:
    """Splits an 'owner/repo' identifier into owner and repository.

    Leading and trailing slashes are tolerated, anything else that is not
    exactly two non-empty segments raises ValueError.
    """
    if repo is None:
        raise ValueError("A repository in the format 'owner/repo' is required.")
    stripped = repo.strip("/")
    if not is_repository_identifier(stripped):
        raise ValueError(f"Repository must be in the format 'owner/repo', got '{repo}'.")
    owner, repository = stripped.split("/")
    return owner, repository


def branch_from_ref(ref: str | None) -> str | None:
    """Return the branch name of a fully-qualified branch ref, or None for tags and other refs."""
    if not ref or not ref.startswith(BRANCH_REF_PREFIX):
        return None
    return ref[len(BRANCH_REF_PREFIX) :]
