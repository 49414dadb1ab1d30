"""Contains reporting of sync outcomes for workflow runs."""

import os
from pathlib import Path

from fork_sync_manager.synchronize.models import SyncDecision, SyncOutcome


def sync_status(outcome: SyncOutcome) -> str:
    """Return a short status word for a sync outcome."""
    if not outcome.success:
        return "failed"
    if outcome.decision == SyncDecision.SKIPPED:
        return "skipped"
    if outcome.decision == SyncDecision.NOOP:
        return "up-to-date"
    if outcome.dry_run:
        return "dry-run"
    return "success"


def summarize_sync_outcome(outcome: SyncOutcome) -> str:
    """Render a multi-line, markdown-flavoured summary of a sync outcome."""
    lines = [
        f"**Sync Status:** {sync_status(outcome).upper()}",
        f"**Result:** {outcome.message}",
        f"**Strategy:** {outcome.decision.value}",
        f"**Commits Synced:** {outcome.commits_synced or 0}",
    ]
    if outcome.pull_request_number is not None:
        lines.append(f"**Pull Request:** #{outcome.pull_request_number}")
    if outcome.sync_branch is not None:
        lines.append(f"**Sync Branch:** {outcome.sync_branch}")
    if outcome.missing_secrets:
        lines.append(f"**Secrets Needing Manual Sync:** {', '.join(outcome.missing_secrets)}")
    return "\n".join(lines)


def write_workflow_outputs(outcome: SyncOutcome, output_path: Path | None = None) -> bool:
    """Append sync-status, commits-synced, missing-secrets and changes-summary to the workflow output file.

    The file defaults to $GITHUB_OUTPUT. Returns False when there is none,
    i.e. when not running inside a workflow.
    """
    if output_path is None:
        github_output = os.environ.get("GITHUB_OUTPUT")
        if not github_output:
            return False
        output_path = Path(github_output)
    summary = summarize_sync_outcome(outcome)
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"sync-status={sync_status(outcome)}\n")
        f.write(f"commits-synced={outcome.commits_synced or 0}\n")
        f.write(f"missing-secrets={','.join(outcome.missing_secrets)}\n")
        f.write(f"changes-summary<<FORK_SYNC_EOF\n{summary}\nFORK_SYNC_EOF\n")
    return True
