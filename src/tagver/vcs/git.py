"""Git access for tagver.

``GitRepository`` shells out to the ``git`` executable and implements the
``HistorySource`` protocol consumed by the calculator and the changelog
generator. Commit messages are read with ``%B`` and separated by a sentinel
so multi-line bodies survive intact.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from tagver.core.commits import ChangeTag
from tagver.core.version import Version
from tagver.exceptions import (
    GitError,
    IllegalArgumentError,
    InvalidGitDataError,
    VersionFormattingError,
)

logger = logging.getLogger(__name__)

COMMIT_MSG_END_TAG = "[msg-end]"
MAX_BRANCH_NAME_LENGTH = 255

_SHA_PATTERN = re.compile(r"^[0-9a-f]{40}$")
_VERSION_CHANGE_GREP = r"\[VERSION_CHANGE\] "
_NUMBER = r"(0|[1-9][0-9]*)"
PROD_VERSION_CHANGE_GREP = rf"{_VERSION_CHANGE_GREP}[1-9][0-9]*\.{_NUMBER}\.{_NUMBER}$"
INITIAL_DEV_VERSION_CHANGE_GREP = rf"{_VERSION_CHANGE_GREP}0\.[1-9][0-9]*\.0-[^[:space:]]+$"


@dataclass(frozen=True)
class ReleasePoint:
    """The commit that recorded a production version."""

    sha: str
    version: Version


def _ere_escape(text: str) -> str:
    return re.sub(r"([.^$*+?()\[\]{}|\\])", r"\\\1", text)


class HistorySource(Protocol):
    """What the versioning engine needs from version control."""

    def get_current_branch(self) -> str: ...

    def get_commit_messages(
        self,
        since_sha: str | None = None,
        newest_first: bool = False,
    ) -> list[str]: ...

    def get_last_prod_version(self) -> ReleasePoint | None: ...

    def get_version_commit_sha(self, version: str) -> str | None: ...

    def get_initial_dev_version_shas(self) -> list[str]: ...


class GitRepository:
    """A git working tree accessed through the ``git`` command."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else Path.cwd()

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=False,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            raise GitError(
                f"git {args[0]} failed with exit code {result.returncode}",
                stderr=result.stderr,
            )
        return result

    def is_repository(self) -> bool:
        return self._run("rev-parse", "--is-inside-work-tree", check=False).returncode == 0

    def check_reference(self, reference: str) -> bool:
        """Return True if ``reference`` is a valid branch name."""
        if not isinstance(reference, str) or not reference:
            raise IllegalArgumentError(f"Invalid reference: {reference!r}")
        if len(reference) > MAX_BRANCH_NAME_LENGTH:
            return False
        return self._run("check-ref-format", "--branch", reference, check=False).returncode == 0

    def get_current_branch(self) -> str:
        """Get the name of the checked out branch.

        Raises:
            InvalidGitDataError: If HEAD is detached
        """
        branch = self._run("branch", "--show-current").stdout.strip()
        if not branch:
            raise InvalidGitDataError(
                "The command to retrieve the current branch name returned an empty result. "
                "Be sure a valid branch is checked out and not a commit SHA or tag."
            )
        logger.debug("The current branch is %s.", branch)
        return branch

    def get_commit_count(self) -> int:
        result = self._run("rev-list", "--count", "HEAD", check=False)
        if result.returncode != 0:
            return 0
        return int(result.stdout.strip() or 0)

    def get_commit_message(self, sha: str) -> str:
        return self._run("log", "--format=%B", "-n", "1", sha).stdout.strip()

    def get_commit_messages(
        self,
        since_sha: str | None = None,
        newest_first: bool = False,
    ) -> list[str]:
        """Get commit messages of the current branch.

        Args:
            since_sha: Only commits after this SHA; the whole history when None
            newest_first: Return newest to oldest instead of oldest to newest

        Raises:
            InvalidGitDataError: If the branch has no commits
        """
        if self.get_commit_count() == 0:
            raise InvalidGitDataError(
                f"The current branch {self.get_current_branch()} doesn't contain any commits."
            )

        args = ["log", "--date-order", "--reverse", f"--format=%B{COMMIT_MSG_END_TAG}"]
        if since_sha:
            args.append(f"{since_sha}..HEAD")

        output = self._run(*args).stdout
        messages = [m.strip() for m in output.strip().split(COMMIT_MSG_END_TAG) if m.strip()]

        if since_sha:
            logger.debug(
                "Retrieved commit history with %d records after commit %s.", len(messages), since_sha
            )
        else:
            logger.debug("Retrieved commit history with %d records.", len(messages))

        if newest_first:
            messages.reverse()
        return messages

    def _grep_shas(self, pattern: str, limit: int | None = None) -> list[str]:
        args = ["log", "--date-order", "--format=%H", f"--grep={pattern}", "-E"]
        if limit is not None:
            args[1:1] = ["-n", str(limit)]
        output = self._run(*args).stdout.strip()
        shas = output.split("\n") if output else []
        for sha in shas:
            if not _SHA_PATTERN.match(sha):
                raise InvalidGitDataError(
                    f"The commit SHA {sha!r} doesn't match the 40 character SHA-1 format."
                )
        return shas

    def get_version_commit_sha(self, version: str) -> str | None:
        """Get the SHA of the newest commit recording ``version``."""
        if not isinstance(version, str) or not version:
            raise IllegalArgumentError(f"Invalid version: {version!r}")

        shas = self._grep_shas(f"{_VERSION_CHANGE_GREP}{_ere_escape(version)}$", limit=1)
        if not shas:
            logger.debug("The version %s commit SHA was not found.", version)
            return None
        logger.debug("The version %s commit SHA is %s.", version, shas[0])
        return shas[0]

    def get_initial_dev_version_shas(self) -> list[str]:
        """Get SHAs of all initial development version change commits, newest first."""
        return self._grep_shas(INITIAL_DEV_VERSION_CHANGE_GREP)

    def get_last_prod_version(self) -> ReleasePoint | None:
        """Find the newest production version change commit.

        Raises:
            InvalidGitDataError: If the matching commit message is malformed
        """
        shas = self._grep_shas(PROD_VERSION_CHANGE_GREP, limit=1)
        if not shas:
            logger.debug("The last recorded production version commit was not found.")
            return None

        sha = shas[0]
        message = self.get_commit_message(sha)
        tag = ChangeTag.VERSION_CHANGE.tag
        _, found, recorded = message.partition(tag)
        try:
            if not found:
                raise VersionFormattingError(f"No {tag} tag in commit {sha}")
            version = Version.parse(recorded.strip())
        except VersionFormattingError as e:
            raise InvalidGitDataError(
                "The last recorded production version commit message did not match the correct "
                f"format. Please amend the commit message and try again.\n\n{message}"
            ) from e

        if not version.is_production:
            raise InvalidGitDataError(
                f"The last recorded production version commit records {version}, which is not a "
                "production version."
            )

        logger.debug("The last recorded production version is %s (%s).", version, sha)
        return ReleasePoint(sha=sha, version=version)

    def create_commit(self, message: str) -> None:
        """Create a commit from the staged changes."""
        subject, _, body = message.partition("\n\n")
        args = ["commit", "-m", subject]
        if body:
            args.extend(["-m", body])

        result = self._run(*args, check=False)
        if result.returncode != 0:
            raise GitError(
                "The command to create the commit failed",
                stderr=result.stdout or result.stderr,
            )
        logger.info("Successfully created commit.")
