"""Outcome Reporter: turns a run's conclusion into the process exit code."""

import sys

from pushwatch.github_client import SUCCESS, normalize_conclusion

FULL_LOG_HEADER = "----- Full Logs (final) -----"


class OutcomeReporter:
    """Reports the conclusion of a completed run.

    Args:
        gh_client: GitHubClient (or FakeGitHubClient) for the final log fetch.
        repo_slug: "owner/name" of the repository.
    """

    def __init__(self, gh_client, repo_slug):
        self._gh_client = gh_client
        self._repo_slug = repo_slug

    def report(self, run, conclusion) -> int:
        """Print the conclusion and return 0 for success, 1 otherwise.

        Any conclusion other than success replays the complete log once
        more. A failed replay fetch is reported on stderr and does not
        change the exit code.
        """
        print(f"Run completed with conclusion: {conclusion}")
        if normalize_conclusion(conclusion) == SUCCESS:
            return 0

        print(FULL_LOG_HEADER)
        full_log = self._gh_client.get_run_log(self._repo_slug, run.run_id)
        if full_log is None:
            print(f"Error: could not fetch full log for run {run.run_id}", file=sys.stderr)
        else:
            print(full_log, end="" if full_log.endswith("\n") else "\n")
        return 1
