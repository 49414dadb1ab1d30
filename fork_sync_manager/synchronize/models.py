"""Models describing the state and results of a single sync attempt."""

from dataclasses import dataclass, field
from enum import Enum


class SyncDecision(str, Enum):
    """What a sync attempt does once the comparison is known."""

    NOOP = "noop"
    PULL_REQUEST = "pull_request"
    DIRECT_PUSH = "direct_push"
    SKIPPED = "skipped"


class ComparisonStatus(str, Enum):
    """Relationship of the fork's branch to the upstream branch, from the fork's point of view."""

    IDENTICAL = "identical"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"


@dataclass(frozen=True)
class CommitSummary:
    """A commit present upstream but missing from the fork."""

    sha: str
    message: str

    @property
    def first_line(self) -> str:
        """Return the subject line of the commit message."""
        return self.message.split("\n", 1)[0]


@dataclass
class ComparisonResult:
    """Result of comparing a fork's branch with the upstream default branch."""

    behind_by: int
    ahead_by: int
    status: ComparisonStatus
    base_branch: str
    commits: list[CommitSummary] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Result of validating a raw sync configuration document."""

    valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class SyncOutcome:
    """Result of a sync attempt, reported back to the event router or CLI."""

    success: bool
    message: str
    commits_synced: int | None = None
    decision: SyncDecision = SyncDecision.NOOP
    pull_request_number: int | None = None
    sync_branch: str | None = None
    dry_run: bool = False
    missing_secrets: list[str] = field(default_factory=list)
