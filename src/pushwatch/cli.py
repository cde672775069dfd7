"""Click command for pushwatch: push, find the CI run for the commit, stream it."""

import os
import sys

import click

from pushwatch.git_repository import CommitError, GitRepository, PushError, RepositoryContextError
from pushwatch.github_client import GitHubClient
from pushwatch.publisher import Publisher
from pushwatch.repo_context import resolve_repo_context
from pushwatch.run_watcher import RunWatcher
from pushwatch.watch_opts import DEFAULT_WORKFLOW_FILE, WatchOpts

INTERRUPTED_EXIT_CODE = 130


def run_pushwatch(opts: WatchOpts, cwd=None) -> int:
    """Publish the working tree and watch the resulting workflow run.

    Returns:
        Process exit code: 0 when the run concluded success, 1 otherwise.
    """
    try:
        git_repo = GitRepository.discover(cwd or os.getcwd())
        gh_client = GitHubClient(cwd=git_repo.working_tree_dir, timeout_seconds=opts.gh_timeout)
        context = resolve_repo_context(
            git_repo, gh_client, opts.remote, opts.branch, opts.workflow,
        )
    except RepositoryContextError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    context.print_banner()

    try:
        if opts.no_push:
            commit_ref = git_repo.head_sha
            print(f"Watching commit: {commit_ref}")
        else:
            publisher = Publisher(
                git_repo, opts.remote, context.branch, trigger_empty=opts.trigger_empty,
            )
            commit_ref = publisher.publish(opts.message)
    except (CommitError, PushError, RepositoryContextError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return RunWatcher(gh_client, context, opts).watch(commit_ref)


@click.command("pushwatch")
@click.argument("message", required=False)
@click.option("--workflow", envvar="WORKFLOW_FILE", default=DEFAULT_WORKFLOW_FILE, show_default=True,
              help="Workflow file path or name whose runs are watched")
@click.option("--remote", envvar="REMOTE", default="origin", show_default=True,
              help="Git remote to push to")
@click.option("--branch", envvar="BRANCH", default=None,
              help="Branch to push (default: current branch)")
@click.option("--max-attempts", envvar="PUSHWATCH_MAX_ATTEMPTS", type=int, default=150, show_default=True,
              help="Run list polls before giving up on finding the run")
@click.option("--poll-interval", envvar="PUSHWATCH_POLL_INTERVAL", type=float, default=2, show_default=True,
              help="Seconds between run list polls")
@click.option("--log-interval", envvar="PUSHWATCH_LOG_INTERVAL", type=float, default=5, show_default=True,
              help="Seconds between log polls")
@click.option("--recent-runs", type=int, default=10, show_default=True,
              help="Runs to list when no run for the commit is found")
@click.option("--gh-timeout", envvar="PUSHWATCH_GH_TIMEOUT", type=int, default=60, show_default=True,
              help="Timeout in seconds for a single gh call")
@click.option("--trigger-empty", is_flag=True,
              help="Create an empty commit when there is nothing new to push")
@click.option("--no-push", is_flag=True,
              help="Don't commit or push; watch the run for the current HEAD")
def main(**kwargs):
    """Push the current branch and stream the GitHub Actions run for the pushed commit.

    MESSAGE is the commit message used when local changes need committing.
    """
    opts = WatchOpts(**kwargs)
    opts.validate()
    try:
        exit_code = run_pushwatch(opts)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(INTERRUPTED_EXIT_CODE)
    sys.exit(exit_code)
