"""Shared fixtures and utilities for pushwatch tests."""

import os
import sys
import tempfile

import pytest
from git import Repo

# Ensure tests/pushwatch/ is on sys.path so test files can import
# fake_github_client unambiguously (avoids conftest module name collisions).
sys.path.insert(0, os.path.dirname(__file__))

from fake_github_client import FakeGitHubClient  # noqa: E402, F401
from fake_git_repository import FakeGitRepository  # noqa: E402, F401

SHA = "3f786850e387550fdab836ed7e6dc881de23001b"
OTHER_SHA = "89e6c98d92887913cadf06b2adb97f26cde4849b"


def run_entry(run_id, head_sha, created_at):
    """Build one element of a `gh run list --json` response."""
    return {"databaseId": run_id, "headSha": head_sha, "createdAt": created_at}


def numbered_log(count):
    """Return cumulative log text with lines "line 1" .. "line <count>"."""
    return "".join(f"line {n}\n" for n in range(1, count + 1))


class RecordingSleep:
    """Sleep replacement that records requested durations instead of waiting."""

    def __init__(self):
        self.durations = []

    def __call__(self, seconds):
        self.durations.append(seconds)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def test_git_repo():
    """Create a temporary git repository for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo = Repo.init(tmpdir)
        repo.config_writer().set_value("user", "email", "test@test.com").release()
        repo.config_writer().set_value("user", "name", "Test").release()
        yield tmpdir, repo


@pytest.fixture
def test_git_repo_with_commit():
    """Create a temporary git repository with an initial commit."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo = Repo.init(tmpdir)
        repo.config_writer().set_value("user", "email", "test@test.com").release()
        repo.config_writer().set_value("user", "name", "Test").release()

        readme = os.path.join(tmpdir, "README.md")
        with open(readme, "w") as f:
            f.write("# Test Repo")
        repo.index.add(["README.md"])
        repo.index.commit("Initial commit")

        yield tmpdir, repo


@pytest.fixture
def repo_with_remote():
    """Create a clone of a bare repository so push and upstream tracking work."""
    with tempfile.TemporaryDirectory() as tmpdir:
        bare_dir = os.path.join(tmpdir, "remote.git")
        Repo.init(bare_dir, bare=True)

        work_dir = os.path.join(tmpdir, "work")
        repo = Repo.init(work_dir)
        repo.config_writer().set_value("user", "email", "test@test.com").release()
        repo.config_writer().set_value("user", "name", "Test").release()
        readme = os.path.join(work_dir, "README.md")
        with open(readme, "w") as f:
            f.write("# Test Repo")
        repo.index.add(["README.md"])
        repo.index.commit("Initial commit")
        repo.git.branch("-M", "main")
        repo.create_remote("origin", bare_dir)

        yield work_dir, repo, bare_dir
