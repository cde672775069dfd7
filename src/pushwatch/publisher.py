"""Publisher: commits local changes and pushes so CI has a commit to run on."""

from datetime import datetime, timezone


def default_commit_message(now=None):
    now = now or datetime.now(timezone.utc)
    return f"chore: deploy {now.strftime('%Y-%m-%dT%H:%M:%SZ')}"


class Publisher:
    """Commits and pushes the working tree, returning the pushed commit SHA.

    Args:
        git_repo: GitRepository (or FakeGitRepository) for the local checkout.
        remote: Remote to push to.
        branch: Remote branch to push to.
        trigger_empty: Create an empty commit when there is nothing to push,
            so that the push still triggers a new workflow run.
    """

    def __init__(self, git_repo, remote, branch, trigger_empty=False):
        self._git_repo = git_repo
        self._remote = remote
        self._branch = branch
        self._trigger_empty = trigger_empty

    def publish(self, message=None):
        """Commit if needed, push, and return HEAD's SHA read after the push.

        Raises:
            CommitError: If committing local changes fails.
            PushError: If the push fails.
        """
        message = message or default_commit_message()

        self._git_repo.fetch(self._remote, self._branch)

        committed = False
        if self._git_repo.has_uncommitted_changes():
            committed = self._git_repo.commit_all(message)
            if committed:
                print(f"Committed local changes: {message}")

        if not committed and self._trigger_empty and self._git_repo.commits_ahead_of_upstream() == 0:
            self._git_repo.commit_empty(message)
            print(f"Created empty commit to trigger the workflow: {message}")

        print(f"Pushing {self._git_repo.head_sha} to {self._remote}/{self._branch} ...")
        self._git_repo.push(self._remote, self._branch)

        sha = self._git_repo.head_sha
        print(f"Pushed commit: {sha}")
        return sha
