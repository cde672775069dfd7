"""Log Tailer: streams only the unseen suffix of a run's cumulative log."""

import time
from typing import Iterator, List

from pushwatch.github_client import COMPLETED


def split_log_lines(log_text, include_partial=True):
    """Split log text into lines on "\\n" only, the way `wc -l` counts them.

    A trailing segment without a final newline is a line still being
    written; it is only returned when include_partial is True.
    """
    if not log_text:
        return []
    lines = log_text.split("\n")
    partial = lines.pop()
    if partial and include_partial:
        lines.append(partial)
    return lines


class LogCursor:
    """Number of log lines already emitted for one run. Never decreases."""

    def __init__(self):
        self._position = 0

    @property
    def position(self):
        return self._position

    def unseen(self, lines: List[str]) -> List[str]:
        """Return lines after the cursor and advance past them.

        A log no longer than the cursor (no growth, or a shorter partial
        fetch) yields nothing and leaves the cursor where it is.
        """
        total = len(lines)
        if total <= self._position:
            return []
        new_lines = lines[self._position:total]
        self._position = total
        return new_lines


class LogTailer:
    """Polls a run's status and log until the run completes.

    Args:
        gh_client: GitHubClient (or FakeGitHubClient) for status and log fetches.
        repo_slug: "owner/name" of the repository.
        poll_interval: Seconds to sleep between polls.
        sleep: Sleep function, injectable for tests.
        max_final_fetches: Log fetches allowed after completion is observed
            before giving up on the final log.
    """

    def __init__(self, gh_client, repo_slug, poll_interval=5, sleep=time.sleep, max_final_fetches=5):
        self._gh_client = gh_client
        self._repo_slug = repo_slug
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._max_final_fetches = max_final_fetches
        self._cursor = LogCursor()
        self._buffer = None

    @property
    def cursor(self):
        return self._cursor.position

    @property
    def buffer(self):
        """Lines from the most recent fetch; None outside of tail()."""
        return self._buffer

    def tail(self, run) -> Iterator[List[str]]:
        """Yield batches of new log lines until the run's status is completed.

        Status and log are fetched on every poll. A failed fetch counts as
        "no new data" and the loop carries on. Once completion is observed
        the status is not fetched again; the log is re-fetched until a
        fetch covers everything already emitted, then its remaining lines,
        including an unterminated last line, are emitted.
        """
        completed = False
        final_fetches = 0
        try:
            while True:
                if not completed:
                    status = self._gh_client.get_run_status(self._repo_slug, run.run_id)
                    completed = status == COMPLETED
                log_text = self._gh_client.get_run_log(self._repo_slug, run.run_id)
                if log_text is not None:
                    self._buffer = split_log_lines(log_text, include_partial=completed)
                    new_lines = self._cursor.unseen(self._buffer)
                    if new_lines:
                        yield new_lines
                if completed:
                    final_fetches += 1
                    if self._is_final_log(log_text) or final_fetches >= self._max_final_fetches:
                        return
                self._sleep(self._poll_interval)
        finally:
            self._buffer = None

    def _is_final_log(self, log_text):
        return log_text is not None and len(self._buffer) >= self._cursor.position
