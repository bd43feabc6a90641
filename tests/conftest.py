"""Shared test fixtures."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tagver.vcs.git import GitRepository


def _git(path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture(autouse=True)
def reset_tagver_logger():
    """Undo logging set up by CLI invocations."""
    yield
    logger = logging.getLogger("tagver")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def history() -> MagicMock:
    """A mocked git history on a feature branch with no production release."""
    repo = MagicMock(spec=GitRepository)
    repo.get_current_branch.return_value = "feature"
    repo.get_last_prod_version.return_value = None
    repo.get_initial_dev_version_shas.return_value = []
    repo.get_version_commit_sha.return_value = None
    return repo


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """An empty git repository on branch ``master``."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    _git(tmp_path, "init", "--quiet")
    _git(tmp_path, "symbolic-ref", "HEAD", "refs/heads/master")
    _git(tmp_path, "config", "user.name", "Test")
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    return tmp_path


@pytest.fixture
def make_commit(git_repo: Path) -> Callable[[str], str]:
    """Create an empty commit with the given message and return its SHA."""

    def _make_commit(message: str) -> str:
        _git(git_repo, "commit", "--allow-empty", "--quiet", "-m", message)
        return _git(git_repo, "rev-parse", "HEAD")

    return _make_commit


@pytest.fixture
def checkout(git_repo: Path) -> Callable[[str], None]:
    """Create and switch to a new branch."""

    def _checkout(branch: str) -> None:
        _git(git_repo, "checkout", "--quiet", "-b", branch)

    return _checkout
