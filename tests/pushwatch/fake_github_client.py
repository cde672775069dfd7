"""FakeGitHubClient: test double for GitHubClient.

Separated into its own module so tests can import it unambiguously
regardless of pytest's conftest resolution order.
"""


class FakeGitHubClient:
    """Test double for GitHubClient that replays scripted responses.

    Sequences are consumed one entry per call; the last entry repeats once
    the sequence is exhausted.

    Usage:
        fake = FakeGitHubClient()
        fake.set_run_list_sequence([[], [{"databaseId": 7, "headSha": sha, "createdAt": "..."}]])
        fake.set_status_sequence(7, ["in_progress", "completed"])
        fake.set_log_sequence(7, ["line 1\\n", "line 1\\nline 2\\n"])
        fake.set_conclusion(7, "success")
    """

    def __init__(self):
        self._repo_slug = "owner/repo"
        self._run_lists = [[]]
        self._statuses = {}
        self._logs = {}
        self._conclusions = {}
        self._recent_runs_table = "STATUS  TITLE  WORKFLOW  BRANCH  EVENT  ID  ELAPSED  AGE\n"
        self.calls = []

    @staticmethod
    def _next(sequence):
        if len(sequence) > 1:
            return sequence.pop(0)
        return sequence[0]

    def set_repo_slug(self, slug):
        self._repo_slug = slug

    def set_run_list_sequence(self, run_lists):
        self._run_lists = list(run_lists)

    def set_status_sequence(self, run_id, statuses):
        self._statuses[run_id] = list(statuses)

    def set_log_sequence(self, run_id, logs):
        self._logs[run_id] = list(logs)

    def set_conclusion(self, run_id, conclusion):
        self._conclusions[run_id] = conclusion

    def set_recent_runs_table(self, table):
        self._recent_runs_table = table

    def get_repo_slug(self):
        self.calls.append(("get_repo_slug",))
        return self._repo_slug

    def list_workflow_runs(self, repo_slug, workflow, limit=20):
        self.calls.append(("list_workflow_runs", repo_slug, workflow))
        return self._next(self._run_lists)

    def get_run_status(self, repo_slug, run_id):
        self.calls.append(("get_run_status", repo_slug, run_id))
        return self._next(self._statuses.get(run_id, [None]))

    def get_run_conclusion(self, repo_slug, run_id):
        self.calls.append(("get_run_conclusion", repo_slug, run_id))
        return self._conclusions.get(run_id)

    def get_run_log(self, repo_slug, run_id):
        self.calls.append(("get_run_log", repo_slug, run_id))
        return self._next(self._logs.get(run_id, [None]))

    def format_recent_runs(self, repo_slug, workflow, limit=10):
        self.calls.append(("format_recent_runs", repo_slug, workflow, limit))
        return self._recent_runs_table
