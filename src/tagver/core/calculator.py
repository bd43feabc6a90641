"""Next-version calculation from commit history.

Two entry paths exist. Before any production release has been recorded on a
non-production branch, the initial development path counts earlier
``0.N.0-*`` version change commits. Once a production version exists, the
regular path bumps it using one of two strategies:

- ``SEQUENTIAL``: every versionable commit bumps independently
- ``COLLECTIVE``: a contiguous run of same-category commits bumps once
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from tagver.core.commits import BumpCategory, classify, classify_all, is_versionable
from tagver.core.version import (
    STARTING_INITIAL_DEV_VERSION,
    STARTING_PROD_VERSION,
    AppendageType,
    StrategyType,
    Version,
    require_branch_name,
)
from tagver.exceptions import IllegalArgumentError, InvalidGitDataError, VersionFormattingError

if TYPE_CHECKING:
    from tagver.vcs.git import HistorySource, ReleasePoint

logger = logging.getLogger(__name__)


def _bump(version: Version, category: BumpCategory | None) -> Version:
    if category is BumpCategory.BREAKING:
        return Version(version.major + 1, 0, 0)
    if category is BumpCategory.FEATURE:
        return Version(version.major, version.minor + 1, 0)
    if category is BumpCategory.PATCH:
        return Version(version.major, version.minor, version.patch + 1)
    return version


def _require_prod_version(last_prod_version: Version | str) -> Version:
    if isinstance(last_prod_version, str):
        if not last_prod_version:
            raise IllegalArgumentError("A last production version is required for regular calculation.")
        try:
            parsed = Version.parse(last_prod_version)
        except VersionFormattingError:
            parsed = None
    elif isinstance(last_prod_version, Version):
        parsed = last_prod_version
    else:
        raise IllegalArgumentError(f"Invalid last production version: {last_prod_version!r}")

    if parsed is None or not parsed.is_production:
        raise VersionFormattingError(
            f"The specified production version {last_prod_version} does not meet semantic version "
            "formatting standards (see https://semver.org for more details). Please note that this "
            "error will require manually modifying the last version commit message in order to "
            "properly calculate the most recent version in the future."
        )
    return parsed


def calculate_initial_dev(initial_dev_version_count: int, messages_since: Sequence[str]) -> Version:
    """Calculate the next initial development version (without appendage).

    Args:
        initial_dev_version_count: Number of ``0.N.0-*`` version change commits
            already recorded on the branch
        messages_since: Commit messages after the most recent of those commits

    Returns:
        ``0.<minor>.0`` where minor is the count, plus one if anything
        versionable happened since
    """
    if not isinstance(initial_dev_version_count, int) or initial_dev_version_count < 0:
        raise IllegalArgumentError(
            f"Invalid initial development version count: {initial_dev_version_count!r}"
        )

    minor = initial_dev_version_count
    if is_versionable(messages_since):
        minor += 1

    return Version(0, minor, 0) if minor > 0 else STARTING_INITIAL_DEV_VERSION


def calculate_regular(
    strategy: StrategyType | str,
    messages: Sequence[str],
    last_prod_version: Version | str,
) -> Version:
    """Calculate the next version from the last production version.

    Args:
        strategy: Versioning strategy
        messages: Commit messages since the last production version, oldest first
        last_prod_version: Last production version (``MAJOR.MINOR.PATCH``)

    Returns:
        The calculated production-form version

    Raises:
        VersionFormattingError: If the base is not a production version
    """
    strategy = StrategyType.from_name(strategy)
    version = _require_prod_version(last_prod_version)
    records = classify_all(messages)

    logger.debug("Using the %s strategy type for version calculation.", strategy.value)

    if strategy is StrategyType.SEQUENTIAL:
        for record in records:
            version = _bump(version, record.category)
        return version

    runs = [record.category for record in records if record.is_versionable]
    for index, category in enumerate(runs):
        # A run closes when the immediately following commit differs
        following = runs[index + 1] if index + 1 < len(runs) else None
        if category is not following:
            version = _bump(version, category)
    return version


def apply_appendage(
    version: Version,
    branch_name: str,
    appendage_type: AppendageType | str,
) -> Version:
    """Append the development suffix to ``version``.

    Args:
        version: Numeric version to decorate
        branch_name: Current branch, used for ``BRANCH_NAME``
        appendage_type: Which suffix to apply

    Returns:
        ``<version>-<branch_name>`` or ``<version>-SNAPSHOT``
    """
    appendage_type = AppendageType.from_name(appendage_type)
    require_branch_name(branch_name, "current")

    if appendage_type is AppendageType.BRANCH_NAME:
        updated = version.with_appendage(branch_name)
    else:
        updated = version.with_appendage(appendage_type.name)

    logger.debug("Applied the development version appendage %s.", appendage_type.value)
    return updated


def _version_from_initial_commit(messages: Sequence[str], on_prod_branch: bool) -> Version | None:
    for message in reversed(messages):
        record = classify(message)
        if not record.is_initial_commit:
            continue
        if record.embedded_version is None:
            raise VersionFormattingError(
                "It has been detected that the version found in the Initial Commit does not meet "
                "semantic version formatting standards (see https://semver.org for more details). "
                "Perhaps it was added manually or changed using Git rebase. Please fix this commit "
                "and try again."
            )
        if on_prod_branch:
            return STARTING_PROD_VERSION
        logger.debug(
            "Using the version found in the last recorded Initial Commit since no other "
            "applicable commits exist to determine the version."
        )
        return record.embedded_version
    return None


def determine(
    history: HistorySource,
    last_prod: ReleasePoint | None,
    strategy: StrategyType | str,
    appendage_type: AppendageType | str,
    prod_branch: str = "master",
) -> Version:
    """Determine the version for the current branch.

    Args:
        history: Source of commit history for the current branch
        last_prod: The last production version change commit, if any
        strategy: Versioning strategy for the regular path
        appendage_type: Development suffix applied off the production branch
        prod_branch: Name of the production branch

    Returns:
        The determined version

    Raises:
        VersionFormattingError: If a recorded version cannot be parsed
        InvalidGitDataError: If no commits exist to determine a version from
    """
    strategy = StrategyType.from_name(strategy)
    appendage_type = AppendageType.from_name(appendage_type)
    require_branch_name(prod_branch, "production")

    current_branch = history.get_current_branch()
    on_prod_branch = current_branch == prod_branch
    last_prod_version = last_prod.version if last_prod else None
    messages = history.get_commit_messages(since_sha=last_prod.sha if last_prod else None)

    version: Version | None
    if is_versionable(messages):
        if last_prod_version is not None:
            version = calculate_regular(strategy, messages, last_prod_version)
        elif on_prod_branch:
            version = STARTING_PROD_VERSION
        else:
            initial_dev_shas = history.get_initial_dev_version_shas()
            since = (
                history.get_commit_messages(since_sha=initial_dev_shas[0]) if initial_dev_shas else []
            )
            version = calculate_initial_dev(len(initial_dev_shas), since)
    elif last_prod_version is not None:
        version = last_prod_version
    else:
        version = _version_from_initial_commit(messages, on_prod_branch)

    if version is None:
        raise InvalidGitDataError("Missing applicable commits used to determine the version.")

    if on_prod_branch:
        logger.debug(
            "Skipped applying development version appendage %s since the detected branch is "
            "for production.",
            appendage_type.value,
        )
    elif version == last_prod_version:
        logger.debug(
            "The calculated version %s is the same as the last production version. Therefore, "
            "skipped applying the development version appendage.",
            version,
        )
    elif not version.is_development:
        version = apply_appendage(version, current_branch, appendage_type)

    return version
