"""RunWatcher: locates the run for a pushed commit, tails it, reports the outcome."""

import sys
import time
from enum import Enum

from pushwatch.log_tailer import LogTailer
from pushwatch.outcome_reporter import OutcomeReporter
from pushwatch.run_locator import RunNotFoundError, locate_run


class WatchState(Enum):
    NOT_STARTED = "not_started"
    LOCATING = "locating"
    NOT_FOUND = "not_found"
    FOUND = "found"
    TAILING = "tailing"
    COMPLETED = "completed"
    SUCCESS = "success"
    FAILURE = "failure"


class RunWatcher:
    """Drives one watch from commit SHA to exit code.

    Args:
        gh_client: GitHubClient (or FakeGitHubClient) for all CI queries.
        context: RepoContext with the repo slug and workflow filter.
        opts: WatchOpts with attempt budget and poll intervals.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(self, gh_client, context, opts, sleep=time.sleep):
        self._gh_client = gh_client
        self._context = context
        self._opts = opts
        self._sleep = sleep
        self.state = WatchState.NOT_STARTED

    def watch(self, commit_ref) -> int:
        run = self._locate(commit_ref)
        if run is None:
            return 1

        self.state = WatchState.TAILING
        print("Streaming logs... (Ctrl+C to stop)")
        tailer = LogTailer(
            self._gh_client,
            self._context.repo_slug,
            poll_interval=self._opts.log_interval,
            sleep=self._sleep,
        )
        for batch in tailer.tail(run):
            for line in batch:
                print(line)
            sys.stdout.flush()

        self.state = WatchState.COMPLETED
        conclusion = self._gh_client.get_run_conclusion(self._context.repo_slug, run.run_id)
        if conclusion is None:
            conclusion = "unknown"

        exit_code = OutcomeReporter(self._gh_client, self._context.repo_slug).report(run, conclusion)
        self.state = WatchState.SUCCESS if exit_code == 0 else WatchState.FAILURE
        return exit_code

    def _locate(self, commit_ref):
        self.state = WatchState.LOCATING
        print(f'Waiting for workflow run of "{self._context.workflow}" on commit {commit_ref} ...')
        try:
            run = locate_run(
                self._gh_client,
                self._context.repo_slug,
                self._context.workflow,
                commit_ref,
                max_attempts=self._opts.max_attempts,
                poll_interval=self._opts.poll_interval,
                sleep=self._sleep,
            )
        except RunNotFoundError as e:
            self.state = WatchState.NOT_FOUND
            print(file=sys.stderr)
            print(f"Error: {e}", file=sys.stderr)
            print(self._gh_client.format_recent_runs(
                self._context.repo_slug, self._context.workflow, limit=self._opts.recent_runs,
            ), end="")
            return None

        self.state = WatchState.FOUND
        print(file=sys.stderr)
        print(f"Found run id: {run.run_id}")
        return run
