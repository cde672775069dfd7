"""Options dataclass for the pushwatch command."""

from dataclasses import dataclass

import click

DEFAULT_WORKFLOW_FILE = ".github/workflows/pages.yml"


@dataclass
class WatchOpts:
    """All options for the pushwatch command."""

    message: str | None = None
    workflow: str = DEFAULT_WORKFLOW_FILE
    remote: str = "origin"
    branch: str | None = None
    max_attempts: int = 150
    poll_interval: float = 2
    log_interval: float = 5
    recent_runs: int = 10
    gh_timeout: int = 60
    trigger_empty: bool = False
    no_push: bool = False

    def validate(self):
        """Raise click.UsageError for option values the watch loop can't use."""
        problems = []
        if self.max_attempts < 1:
            problems.append("--max-attempts must be at least 1")
        if self.poll_interval < 0:
            problems.append("--poll-interval must not be negative")
        if self.log_interval < 0:
            problems.append("--log-interval must not be negative")
        if self.recent_runs < 1:
            problems.append("--recent-runs must be at least 1")
        if self.gh_timeout < 1:
            problems.append("--gh-timeout must be at least 1")
        if not self.workflow.strip():
            problems.append("--workflow must not be empty")
        if problems:
            raise click.UsageError("; ".join(problems))
