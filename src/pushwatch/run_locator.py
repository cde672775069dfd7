"""Run Locator: finds the workflow run triggered by one exact commit.

Run listings are eventually consistent, so a run may only show up
several seconds after the push. Matching is on the full commit SHA,
never on "latest run on the branch", so a concurrent run for another
commit is never picked up.
"""

import re
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

_FULL_SHA = re.compile(r"^[0-9a-f]{40}([0-9a-f]{24})?$")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class RunNotFoundError(RuntimeError):
    """No run for the commit appeared within the attempt budget."""

    def __init__(self, commit_ref, attempts):
        super().__init__(f"timed out waiting for workflow run for commit {commit_ref}")
        self.commit_ref = commit_ref
        self.attempts = attempts


@dataclass(frozen=True)
class RunHandle:
    run_id: int
    triggering_commit: str
    created_at: str


def parse_created_at(value: Optional[str]) -> datetime:
    """Parse a gh createdAt timestamp; unparseable values sort oldest."""
    if not value:
        return _OLDEST
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _OLDEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def select_run(runs: List[Dict[str, Any]], commit_ref: str) -> Optional[RunHandle]:
    """Pick the newest run whose headSha equals commit_ref exactly."""
    matches = [run for run in runs if run.get("headSha") == commit_ref]
    if not matches:
        return None
    newest = max(matches, key=lambda run: parse_created_at(run.get("createdAt")))
    return RunHandle(
        run_id=newest.get("databaseId"),
        triggering_commit=newest.get("headSha"),
        created_at=newest.get("createdAt", ""),
    )


def _print_progress_dot():
    print(".", end="", file=sys.stderr, flush=True)


def locate_run(
    gh_client,
    repo_slug,
    workflow,
    commit_ref,
    max_attempts=150,
    poll_interval=2,
    sleep=time.sleep,
    progress=_print_progress_dot,
):
    """Poll the run list until a run for commit_ref appears.

    Args:
        gh_client: GitHubClient (or FakeGitHubClient) for listing runs.
        repo_slug: "owner/name" of the repository.
        workflow: Workflow file name or workflow name to filter on.
        commit_ref: Full SHA of the pushed commit.
        max_attempts: Number of listings before giving up.
        poll_interval: Seconds to sleep between listings.
        sleep: Sleep function, injectable for tests.
        progress: Called after each listing without a match.

    Returns:
        The RunHandle of the matching run.

    Raises:
        ValueError: If commit_ref is not a full hexadecimal SHA.
        RunNotFoundError: If max_attempts listings found no match.
    """
    if not _FULL_SHA.match(commit_ref or ""):
        raise ValueError(f"commit ref must be a full SHA, got {commit_ref!r}")

    for attempt in range(1, max_attempts + 1):
        runs = gh_client.list_workflow_runs(repo_slug, workflow)
        run = select_run(runs, commit_ref)
        if run is not None:
            return run
        progress()
        if attempt < max_attempts:
            sleep(poll_interval)

    raise RunNotFoundError(commit_ref, max_attempts)
