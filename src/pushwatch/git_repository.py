"""GitRepository: wraps GitPython Repo for the commit and push side of a watch.

Provides an injectable interface for Git operations, enabling
FakeGitRepository in tests without unittest.mock.patch.
"""

import subprocess
import sys

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo


class RepositoryContextError(RuntimeError):
    """The repository root, branch or slug could not be determined."""


class PushError(RuntimeError):
    """git push failed."""


class CommitError(RuntimeError):
    """git add or git commit failed, e.g. a hook rejected the commit."""


class GitRepository:
    """Wraps a GitPython Repo with the operations needed to publish a commit.

    Args:
        repo: A GitPython Repo instance.
    """

    def __init__(self, repo):
        self._repo = repo

    @classmethod
    def discover(cls, path):
        """Open the repository containing path.

        Raises:
            RepositoryContextError: If path is not inside a git repository.
        """
        try:
            repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise RepositoryContextError("not inside a git repository")
        if repo.working_tree_dir is None:
            raise RepositoryContextError("repository has no working tree")
        if not repo.head.is_valid():
            raise RepositoryContextError("repository has no commits")
        return cls(repo)

    @property
    def working_tree_dir(self):
        return self._repo.working_tree_dir

    @property
    def head_sha(self):
        try:
            return self._repo.head.commit.hexsha
        except ValueError:
            raise RepositoryContextError("repository has no commits")

    @property
    def current_branch(self):
        """Name of the checked-out branch, or None on a detached HEAD."""
        if self._repo.head.is_detached:
            return None
        return self._repo.active_branch.name

    def remote_url(self, remote):
        """Return the URL of the named remote, or None if it doesn't exist."""
        try:
            return self._repo.remote(remote).url
        except ValueError:
            return None

    def has_uncommitted_changes(self):
        """True for unstaged, staged or untracked changes."""
        return self._repo.is_dirty(untracked_files=True)

    def has_upstream(self):
        if self._repo.head.is_detached:
            return False
        return self._repo.active_branch.tracking_branch() is not None

    def commits_ahead_of_upstream(self):
        """Number of local commits not on the upstream branch.

        Without an upstream every commit is unpublished, so this returns 1
        to force the initial push.
        """
        if not self.has_upstream():
            return 1
        try:
            count = self._repo.git.rev_list("--count", "@{u}..HEAD")
        except GitCommandError:
            return 0
        try:
            return int(count.strip())
        except ValueError:
            return 0

    def fetch(self, remote, branch):
        """Best-effort fetch of the remote branch; returns True on success."""
        result = subprocess.run(
            ["git", "fetch", remote, branch],
            capture_output=True,
            text=True,
            cwd=self.working_tree_dir,
        )
        return result.returncode == 0

    def commit_all(self, message):
        """Stage everything (including untracked files) and commit.

        Returns:
            True if a commit was created, False if there was nothing to commit.

        Raises:
            CommitError: If git add or git commit exits non-zero.
        """
        try:
            self._repo.git.add("-A")
            if not self._repo.is_dirty(index=True, working_tree=False, untracked_files=False):
                return False
            self._repo.git.commit("-m", message)
        except GitCommandError as e:
            raise CommitError(self._describe_failure("commit", e))
        return True

    def commit_empty(self, message):
        try:
            self._repo.git.commit("--allow-empty", "-m", message)
        except GitCommandError as e:
            raise CommitError(self._describe_failure("empty commit", e))

    @staticmethod
    def _describe_failure(action, error):
        # GitPython wraps captured stderr as "stderr: '<text>'"
        stderr = (error.stderr or "").strip()
        if stderr.startswith("stderr:"):
            stderr = stderr[len("stderr:"):].strip().strip("'")
        detail = stderr.strip().splitlines()
        if detail:
            return f"{action} failed: {detail[-1]}"
        return f"{action} failed"

    def push(self, remote, branch):
        """Push the branch, setting upstream when none is configured.

        Raises:
            PushError: If git push exits non-zero.
        """
        args = ["git", "push"]
        if not self.has_upstream():
            args.append("-u")
        if branch == self.current_branch:
            args.extend([remote, branch])
        else:
            args.extend([remote, f"HEAD:refs/heads/{branch}"])
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            cwd=self.working_tree_dir,
        )
        if result.returncode != 0:
            print(result.stderr, end="", file=sys.stderr)
            raise PushError(f"push to {remote}/{branch} failed")
        return True
