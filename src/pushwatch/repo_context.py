"""Resolve the repository, branch, slug and workflow a watch runs against."""

import os
import re
from dataclasses import dataclass

from pushwatch.git_repository import RepositoryContextError

_GITHUB_REMOTE_PATTERN = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$")


@dataclass(frozen=True)
class RepoContext:
    working_tree_dir: str
    repo_slug: str
    branch: str
    workflow: str

    def print_banner(self):
        print(f"Repository: {self.repo_slug}")
        print(f"Branch:     {self.branch}")
        print(f"Workflow:   {self.workflow}")


def parse_repo_slug(remote_url):
    """Extract "owner/name" from a GitHub SSH or HTTPS remote URL.

    Returns:
        The slug, or None if the URL doesn't point at github.com.
    """
    if not remote_url:
        return None
    match = _GITHUB_REMOTE_PATTERN.search(remote_url.strip())
    if not match:
        return None
    return f"{match.group(1)}/{match.group(2)}"


def workflow_filter(workflow_file):
    """Reduce a workflow path to the file name gh expects.

    ".github/workflows/pages.yml" becomes "pages.yml"; a bare name is
    returned unchanged.
    """
    return os.path.basename(workflow_file.rstrip("/"))


def resolve_repo_context(git_repo, gh_client, remote, branch, workflow_file):
    """Build the RepoContext for a watch.

    Args:
        git_repo: GitRepository (or FakeGitRepository) for the local checkout.
        gh_client: GitHubClient (or FakeGitHubClient) used to ask gh for the slug.
        remote: Remote name whose URL is the slug fallback.
        branch: Branch override, or None for the checked-out branch.
        workflow_file: Workflow path or name.

    Raises:
        RepositoryContextError: If the branch or slug can't be determined.
    """
    if not branch:
        branch = git_repo.current_branch
        if not branch:
            raise RepositoryContextError("HEAD is detached; set BRANCH to choose a branch")

    repo_slug = gh_client.get_repo_slug()
    if not repo_slug:
        repo_slug = parse_repo_slug(git_repo.remote_url(remote))
    if not repo_slug:
        raise RepositoryContextError("unable to determine GitHub repo slug (owner/name)")

    return RepoContext(
        working_tree_dir=git_repo.working_tree_dir,
        repo_slug=repo_slug,
        branch=branch,
        workflow=workflow_filter(workflow_file),
    )
