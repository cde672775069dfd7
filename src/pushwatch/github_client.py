"""GitHubClient: wraps all `gh` CLI calls for workflow run operations."""

import json
import subprocess
from typing import Any, Dict, List, Optional

PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"

_PENDING_STATUSES = {"queued", "waiting", "requested", "pending"}

SUCCESS = "success"
FAILURE = "failure"
CANCELLED = "cancelled"
OTHER = "other"


def normalize_status(raw_status: str) -> Optional[str]:
    """Map a gh run status onto pending / in_progress / completed.

    Returns None for an empty or unrecognized status so callers can treat
    it as "no information this poll".
    """
    status = raw_status.strip().lower()
    if status in _PENDING_STATUSES:
        return PENDING
    if status in (IN_PROGRESS, COMPLETED):
        return status
    return None


def normalize_conclusion(raw_conclusion: str) -> str:
    conclusion = raw_conclusion.strip().lower()
    if conclusion in (SUCCESS, FAILURE, CANCELLED):
        return conclusion
    return OTHER


class GitHubClient:
    """Wraps GitHub CLI (gh) calls for workflow run operations.

    All subprocess calls go through _run_gh() for consistency. Read
    operations never raise on gh failure; they return None or an empty
    result so polling loops can retry on the next iteration.

    Args:
        cwd: Directory to run gh in (the repository root).
        timeout_seconds: Upper bound for a single gh invocation.
    """

    def __init__(self, cwd=None, timeout_seconds=60):
        self._cwd = cwd
        self._timeout_seconds = timeout_seconds

    def _run_gh(self, args, **kwargs):
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                cwd=self._cwd,
                timeout=self._timeout_seconds,
                **kwargs,
            )
        except subprocess.TimeoutExpired as e:
            return subprocess.CompletedProcess(
                args, 124, stdout="", stderr=f"gh timed out after {e.timeout}s",
            )

    def get_repo_slug(self) -> Optional[str]:
        result = self._run_gh(
            ["gh", "repo", "view", "--json", "nameWithOwner", "--jq", ".nameWithOwner"]
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def list_workflow_runs(self, repo_slug: str, workflow: str, limit: int = 20) -> List[Dict[str, Any]]:
        """List recent runs of a workflow with id, triggering commit and creation time."""
        result = self._run_gh(
            ["gh", "run", "list", "-R", repo_slug,
             "--workflow", workflow,
             "--json", "databaseId,headSha,createdAt",
             "-L", str(limit)]
        )
        if result.returncode != 0 or not result.stdout.strip():
            return []
        try:
            runs = json.loads(result.stdout)
        except json.JSONDecodeError:
            return []
        if not isinstance(runs, list):
            return []
        return runs

    def get_run_status(self, repo_slug: str, run_id: int) -> Optional[str]:
        result = self._run_gh(
            ["gh", "run", "view", "-R", repo_slug, str(run_id),
             "--json", "status", "--jq", ".status"]
        )
        if result.returncode != 0:
            return None
        return normalize_status(result.stdout)

    def get_run_conclusion(self, repo_slug: str, run_id: int) -> Optional[str]:
        """Return the raw conclusion text reported by gh, or None on failure."""
        result = self._run_gh(
            ["gh", "run", "view", "-R", repo_slug, str(run_id),
             "--json", "conclusion", "--jq", ".conclusion"]
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def get_run_log(self, repo_slug: str, run_id: int) -> Optional[str]:
        """Return the cumulative log text of a run, or None if it can't be fetched.

        gh returns an error while logs are not yet available early in a run.
        """
        result = self._run_gh(
            ["gh", "run", "view", "-R", repo_slug, str(run_id), "--log"]
        )
        if result.returncode != 0:
            return None
        return result.stdout

    def format_recent_runs(self, repo_slug: str, workflow: str, limit: int = 10) -> str:
        """Return gh's human-readable table of the most recent runs."""
        result = self._run_gh(
            ["gh", "run", "list", "-R", repo_slug,
             "--workflow", workflow, "-L", str(limit)]
        )
        if result.returncode != 0:
            return f"Error listing runs: {result.stderr.strip()}"
        return result.stdout
