"""Commit message classification.

Commit messages follow a bracket-tag convention::

    [INITIAL_COMMIT] [BREAKING] [ci-skip] [FEATURE] Short message

    Optional long message body.

Any of the leading tags may be omitted, but a well-formed message carries
exactly one change tag (``[FEATURE]``, ``[BUG_FIX]``, ...). Tag detection is a
presence test over the whole message, not a positional parse.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from tagver.core.version import Version
from tagver.exceptions import IllegalArgumentError, VersionFormattingError

logger = logging.getLogger(__name__)

BREAKING_TAG = "[BREAKING]"
INITIAL_COMMIT_TAG = "[INITIAL_COMMIT]"
CI_SKIP_TAG = "[ci-skip]"

MAX_SHORT_MESSAGE_LENGTH = 60
MAX_LONG_MESSAGE_LENGTH = 512

_LEADING_TAGS = re.compile(r"^(?:\[[^\]\s]+\]\s*)+")


class ChangeTag(Enum):
    """Kinds of change a commit can declare."""

    BUG_FIX = "BUG_FIX"
    CHANGELOG = "CHANGELOG"
    CHORE = "CHORE"
    DEPENDENCY = "DEPENDENCY"
    DOC = "DOC"
    FEATURE = "FEATURE"
    PERF = "PERF"
    REFACTOR = "REFACTOR"
    STYLING = "STYLING"
    TEST = "TEST"
    VERSION_CHANGE = "VERSION_CHANGE"
    WIP = "WIP"

    @property
    def tag(self) -> str:
        """The bracketed literal, e.g. ``[FEATURE]``."""
        return f"[{self.value}]"

    @classmethod
    def from_name(cls, name: str) -> ChangeTag:
        """Look up a change tag by name, case-insensitively."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise IllegalArgumentError(f"Invalid change type: {name!r}")
        try:
            return _CHANGE_TAGS_BY_NAME[name.strip().upper()]
        except KeyError:
            choices = ", ".join(t.name.lower() for t in cls)
            raise IllegalArgumentError(
                f"Unknown change type {name!r}. Expected one of: {choices}"
            ) from None


_CHANGE_TAGS_BY_NAME: dict[str, ChangeTag] = {t.name: t for t in ChangeTag}

# Change tags that warrant a patch bump
PATCH_TAGS = frozenset({ChangeTag.BUG_FIX, ChangeTag.DEPENDENCY, ChangeTag.PERF})
VERSIONABLE_TAGS = PATCH_TAGS | {ChangeTag.FEATURE}


class BumpCategory(Enum):
    """Priority category of a versionable commit (highest first)."""

    BREAKING = "breaking"
    FEATURE = "feature"
    PATCH = "patch"


@dataclass(frozen=True)
class CommitRecord:
    """A commit message broken into its convention parts.

    Attributes:
        raw_message: The message exactly as supplied
        change_tag: The primary change tag, None when the message has none
        change_tags: Every change tag present in the message
        is_breaking: Carries ``[BREAKING]``
        is_initial_commit: Carries ``[INITIAL_COMMIT]``
        is_ci_skip: Carries ``[ci-skip]``
        short_message: First line without the leading tags
        long_message: Body following the first blank line
        embedded_version: Version of a ``[VERSION_CHANGE]`` commit, if parseable
    """

    raw_message: str
    change_tag: ChangeTag | None
    change_tags: frozenset[ChangeTag] = field(default_factory=frozenset)
    is_breaking: bool = False
    is_initial_commit: bool = False
    is_ci_skip: bool = False
    short_message: str = ""
    long_message: str = ""
    embedded_version: Version | None = None

    @property
    def first_line(self) -> str:
        return self.raw_message.split("\n", 1)[0]

    @property
    def is_version_change(self) -> bool:
        return ChangeTag.VERSION_CHANGE in self.change_tags

    @property
    def is_versionable(self) -> bool:
        return self.is_breaking or bool(self.change_tags & VERSIONABLE_TAGS)

    @property
    def category(self) -> BumpCategory | None:
        """Bump category, or None for commits that do not affect the version."""
        if self.is_breaking:
            return BumpCategory.BREAKING
        if ChangeTag.FEATURE in self.change_tags:
            return BumpCategory.FEATURE
        if self.change_tags & PATCH_TAGS:
            return BumpCategory.PATCH
        return None


def _require_message(message: object, operation: str) -> str:
    if not isinstance(message, str):
        raise IllegalArgumentError(f"Invalid commit message passed to {operation}: {message!r}")
    return message


def classify(raw_message: str) -> CommitRecord:
    """Classify a raw commit message.

    Args:
        raw_message: Full commit message (subject plus optional body)

    Returns:
        CommitRecord describing the message
    """
    message = _require_message(raw_message, "classify")
    present = frozenset(t for t in ChangeTag if t.tag in message)
    # First match in declaration order is the primary tag
    primary = next((t for t in ChangeTag if t in present), None)

    subject, _, rest = message.partition("\n")
    body = rest.split("\n", 1)[1] if rest.startswith("\n") else rest

    return CommitRecord(
        raw_message=message,
        change_tag=primary,
        change_tags=present,
        is_breaking=BREAKING_TAG in message,
        is_initial_commit=INITIAL_COMMIT_TAG in message,
        is_ci_skip=CI_SKIP_TAG in message,
        short_message=_LEADING_TAGS.sub("", subject).strip(),
        long_message=body.strip(),
        embedded_version=extract_version(message) if ChangeTag.VERSION_CHANGE in present else None,
    )


def classify_all(messages: Iterable[str]) -> list[CommitRecord]:
    """Classify every message, preserving order."""
    return [classify(m) for m in messages]


def extract_version(raw_message: str) -> Version | None:
    """Extract the version embedded in a ``[VERSION_CHANGE]`` commit.

    The version is the text after ``[VERSION_CHANGE] `` up to the end of the
    message.

    Returns:
        Parsed Version, or None when the tag is absent or the text after it is
        not a valid version
    """
    message = _require_message(raw_message, "extract_version")
    tag = ChangeTag.VERSION_CHANGE.tag
    index = message.find(tag)
    if index < 0:
        return None

    candidate = message[index + len(tag) + 1 :].strip()
    try:
        return Version.parse(candidate)
    except VersionFormattingError:
        return None


def is_versionable(messages: Iterable[str]) -> bool:
    """Return True if any message warrants a version bump."""
    if isinstance(messages, str):
        raise IllegalArgumentError("is_versionable expects a list of commit messages, not a string")
    return any(classify(m).is_versionable for m in messages)


def filter_changelog_commits(messages: Iterable[str]) -> list[str]:
    """Keep version change commits and versionable commits, in order."""
    kept = []
    for message in messages:
        record = classify(message)
        if record.is_version_change or record.is_versionable:
            kept.append(message)
    return kept


def _truncate(text: str, limit: int, label: str) -> str:
    if len(text) > limit:
        logger.info(
            "The %s commit message is too long. It has been truncated to %d characters.",
            label,
            limit,
        )
        return text[:limit]
    return text


def format_commit_message(
    change_tag: ChangeTag | str,
    short_message: str,
    long_message: str = "",
    *,
    is_breaking: bool = False,
    is_initial_commit: bool = False,
    insert_ci_skip: bool = False,
    max_short_length: int = MAX_SHORT_MESSAGE_LENGTH,
    max_long_length: int = MAX_LONG_MESSAGE_LENGTH,
) -> str:
    """Compose a commit message in the tag convention.

    Args:
        change_tag: Kind of change
        short_message: Subject text (the version for a version change commit)
        long_message: Optional body
        is_breaking: Add the ``[BREAKING]`` marker
        is_initial_commit: Add the ``[INITIAL_COMMIT]`` marker
        insert_ci_skip: Add the ``[ci-skip]`` marker
        max_short_length: Subject length limit
        max_long_length: Body length limit

    Returns:
        The complete commit message

    Raises:
        IllegalArgumentError: If a message is blank
    """
    tag = ChangeTag.from_name(change_tag)

    if not isinstance(short_message, str) or not short_message.strip():
        raise IllegalArgumentError("The short commit message must be more than just spaces.")
    if not isinstance(long_message, str):
        raise IllegalArgumentError(f"Invalid long commit message: {long_message!r}")
    if long_message and not long_message.strip():
        raise IllegalArgumentError("The long commit message must be more than just spaces.")

    short_message = _truncate(short_message.strip(), max_short_length, "short")
    long_message = _truncate(long_message.strip(), max_long_length, "long")

    markers = []
    if is_initial_commit:
        markers.append(INITIAL_COMMIT_TAG)
    if is_breaking:
        markers.append(BREAKING_TAG)
    if insert_ci_skip:
        markers.append(CI_SKIP_TAG)
    markers.append(tag.tag)

    subject = f"{' '.join(markers)} {short_message}"
    return f"{subject}\n\n{long_message}" if long_message else subject
