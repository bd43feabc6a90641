"""Changelog generation from tagged commit history.

The changelog is plain markdown::

    # Changelog

    ## 3.0.1

    * [BUG_FIX] fixed a bug
    * [BREAKING] [FEATURE] added a feature

    ## 3.0.0

    * ...

New sections are assembled from the commits recorded since the last version
found in the existing file and spliced in above it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from tagver.core.commits import classify_all, filter_changelog_commits
from tagver.core.version import Version, VersionGrammar, is_version, require_branch_name
from tagver.exceptions import ChangelogError, IllegalArgumentError, InvalidGitDataError

if TYPE_CHECKING:
    from tagver.vcs.git import HistorySource

logger = logging.getLogger(__name__)

DEFAULT_CHANGELOG_FILENAME = "CHANGELOG.md"
CHANGELOG_HEADING = "# Changelog\n\n"
NON_VERSIONED_HEADING = "Non-Versioned Changes"
INITIAL_COMMIT_ENTRY = "Initial Commit"


def _versions_to_skip(
    versions: Sequence[Version],
    on_prod_branch: bool,
) -> set[Version]:
    """Find version headings that must not be written.

    Scanning newest first, a version is skipped when it is superseded by the
    most recently seen production version. On the production branch every
    development version is skipped as well.
    """
    skipped: set[Version] = set()
    last_prod: Version | None = None

    for version in versions:
        if version.is_production:
            last_prod = version
        if version == last_prod:
            continue
        if on_prod_branch or (last_prod is not None and last_prod > version):
            skipped.add(version)

    return skipped


def assemble_additions(
    messages: Sequence[str],
    current_branch: str,
    prod_branch: str = "master",
) -> str:
    """Assemble the changelog sections for a commit history.

    Args:
        messages: Commit messages, newest first
        current_branch: Name of the current branch
        prod_branch: Name of the production branch

    Returns:
        The assembled sections, or an empty string when nothing applies

    Raises:
        InvalidGitDataError: If a version change commit has no valid version
    """
    if isinstance(messages, str) or not isinstance(messages, Sequence):
        raise IllegalArgumentError("assemble_additions expects a list of commit messages")
    require_branch_name(current_branch, "current")
    require_branch_name(prod_branch, "production")

    records = classify_all(filter_changelog_commits(messages))

    for record in records:
        if record.is_version_change and record.embedded_version is None:
            raise InvalidGitDataError(
                "It has been detected that a version change commit does not meet semantic "
                "version formatting standards (see https://semver.org for more details). "
                "Perhaps it was added manually or changed using Git rebase. Please fix this "
                f"commit and try again.\n\nAffected Commit Message:\n\n{record.raw_message}"
            )

    skipped = _versions_to_skip(
        [r.embedded_version for r in records if r.embedded_version is not None],
        on_prod_branch=current_branch == prod_branch,
    )

    parts: list[str] = []
    last_was_bullet = False

    def add_heading(title: str) -> None:
        nonlocal last_was_bullet
        if last_was_bullet:
            parts.append("\n")
        parts.append(f"## {title}\n\n")
        last_was_bullet = False

    def add_bullet(text: str) -> None:
        nonlocal last_was_bullet
        parts.append(f"* {text}\n")
        last_was_bullet = True

    for index, record in enumerate(records):
        if record.is_version_change:
            version = record.embedded_version
            if version in skipped:
                continue
            following = records[index + 1] if index + 1 < len(records) else None
            # A version with nothing after it is already recorded in the changelog
            has_entries = following is not None and not following.is_version_change
            if has_entries or record.is_initial_commit:
                add_heading(str(version))
                if record.is_initial_commit:
                    add_bullet(INITIAL_COMMIT_ENTRY)
        elif record.is_versionable:
            if not parts:
                add_heading(NON_VERSIONED_HEADING)
            add_bullet(record.first_line)

    return "".join(parts)


def get_last_version(changelog: str, current_branch: str, prod_branch: str = "master") -> str:
    """Find the newest version recorded in a changelog.

    Headings are scanned top to bottom. On the production branch only
    production versions count; elsewhere any version does.

    Returns:
        The version string, or an empty string if none is found
    """
    if not isinstance(changelog, str):
        raise IllegalArgumentError("The changelog must be a string")
    require_branch_name(current_branch, "current")

    grammar = VersionGrammar.PRODUCTION if current_branch == prod_branch else None

    for line in changelog.splitlines():
        if not line.startswith("## "):
            continue
        tokens = line[3:].split()
        if len(tokens) == 1 and is_version(tokens[0], grammar):
            return tokens[0]

    return ""


def merge_changelog(existing: str, additions: str, last_version: str) -> str | None:
    """Splice new sections into an existing changelog.

    Everything above the heading of ``last_version`` is replaced by the
    standard heading and the new sections.

    Returns:
        The new changelog text, or None when there is nothing new to write
    """
    if not additions:
        return None
    # Additions already sitting directly under the heading were written before
    if existing.find(additions) == len(CHANGELOG_HEADING):
        return None

    index = existing.find(f"## {last_version}") if last_version else -1
    kept = existing[index:] if index >= 0 else ""

    if kept:
        return f"{CHANGELOG_HEADING}{additions}\n{kept}"
    return f"{CHANGELOG_HEADING}{additions}"


def read_changelog(path: Path) -> str:
    """Read the changelog, returning an empty string when it does not exist."""
    try:
        if not path.is_file():
            return ""
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"Could not read changelog {path}: {e}") from e


def write_changelog(path: Path, content: str) -> None:
    """Write the changelog."""
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"Could not write changelog {path}: {e}") from e


def generate(
    history: HistorySource,
    changelog_path: Path,
    prod_branch: str = "master",
) -> bool:
    """Create or update the changelog file.

    Args:
        history: Source of commit history for the current branch
        changelog_path: Path to the changelog file
        prod_branch: Name of the production branch

    Returns:
        True if the file was written, False if there was nothing to add

    Raises:
        InvalidGitDataError: If the history contains a malformed version commit
        ChangelogError: If the file cannot be read or written
    """
    current_branch = history.get_current_branch()
    existing = read_changelog(changelog_path)

    last_version = get_last_version(existing, current_branch, prod_branch)
    last_version_sha = history.get_version_commit_sha(last_version) if last_version else None

    messages = history.get_commit_messages(since_sha=last_version_sha, newest_first=True)
    additions = assemble_additions(messages, current_branch, prod_branch)

    merged = merge_changelog(existing, additions, last_version)
    if merged is None:
        logger.info("There wasn't anything to add to the changelog.")
        return False

    write_changelog(changelog_path, merged)
    logger.info("Created/updated the changelog.")
    return True
