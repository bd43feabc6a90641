"""Tests for commit message classification and composition."""

from __future__ import annotations

import logging

import pytest

from tagver.core.commits import (
    BumpCategory,
    ChangeTag,
    CommitRecord,
    classify,
    classify_all,
    extract_version,
    filter_changelog_commits,
    format_commit_message,
    is_versionable,
)
from tagver.core.version import Version
from tagver.exceptions import IllegalArgumentError


class TestClassify:
    """Tests for classify()."""

    def test_simple_feature(self):
        """Classify a plain feature commit."""
        record = classify("[FEATURE] Added a thing")

        assert isinstance(record, CommitRecord)
        assert record.change_tag is ChangeTag.FEATURE
        assert record.short_message == "Added a thing"
        assert record.long_message == ""
        assert not record.is_breaking
        assert record.category is BumpCategory.FEATURE

    def test_breaking_feature(self):
        """Breaking outranks the change tag for the bump category."""
        record = classify("[BREAKING] [FEATURE] Reworked the API")

        assert record.is_breaking
        assert record.change_tag is ChangeTag.FEATURE
        assert record.category is BumpCategory.BREAKING
        assert record.short_message == "Reworked the API"

    def test_breaking_non_versionable_tag(self):
        """Breaking makes any commit versionable."""
        record = classify("[BREAKING] [REFACTOR] Removed the old client")

        assert record.is_versionable
        assert record.category is BumpCategory.BREAKING

    @pytest.mark.parametrize("tag", ["[BUG_FIX]", "[DEPENDENCY]", "[PERF]"])
    def test_patch_tags(self, tag: str):
        """Bug fixes, dependency updates and performance changes are patches."""
        assert classify(f"{tag} something").category is BumpCategory.PATCH

    @pytest.mark.parametrize(
        "tag", ["[CHANGELOG]", "[CHORE]", "[DOC]", "[REFACTOR]", "[STYLING]", "[TEST]", "[WIP]"]
    )
    def test_non_versionable_tags(self, tag: str):
        """Other tags do not affect the version."""
        record = classify(f"{tag} something")

        assert not record.is_versionable
        assert record.category is None

    def test_untagged_message(self):
        """A message with no tags has no change tag."""
        record = classify("Merge branch 'main'")

        assert record.change_tag is None
        assert record.change_tags == frozenset()
        assert record.short_message == "Merge branch 'main'"
        assert not record.is_versionable

    def test_long_message(self):
        """The body follows the first blank line."""
        record = classify("[BUG_FIX] Fixed it\n\nIt was broken.\nNow it is not.")

        assert record.short_message == "Fixed it"
        assert record.long_message == "It was broken.\nNow it is not."
        assert record.first_line == "[BUG_FIX] Fixed it"

    def test_tag_detection_is_presence_based(self):
        """Tags anywhere in the message are detected."""
        record = classify("[CHORE] Tidy up\n\nAlso contains [FEATURE] work")

        assert ChangeTag.FEATURE in record.change_tags
        assert record.category is BumpCategory.FEATURE

    def test_primary_tag_follows_declaration_order(self):
        """With several change tags the first declared one is primary."""
        record = classify("[FEATURE] [BUG_FIX] Both")

        assert record.change_tag is ChangeTag.BUG_FIX
        assert record.category is BumpCategory.FEATURE

    def test_markers(self):
        """Initial commit and ci-skip markers are detected."""
        record = classify("[INITIAL_COMMIT] [ci-skip] [VERSION_CHANGE] 0.1.0-main")

        assert record.is_initial_commit
        assert record.is_ci_skip
        assert record.is_version_change
        assert record.embedded_version == Version(0, 1, 0, "main")

    def test_version_change_is_not_versionable(self):
        """Version change commits never bump the version."""
        record = classify("[VERSION_CHANGE] 1.0.0")

        assert record.is_version_change
        assert not record.is_versionable
        assert record.embedded_version == Version(1, 0, 0)

    def test_non_string_rejected(self):
        """Non-string input raises IllegalArgumentError."""
        with pytest.raises(IllegalArgumentError):
            classify(None)  # type: ignore[arg-type]


class TestClassifyAll:
    """Tests for classify_all()."""

    def test_preserves_order(self):
        """Records are returned in input order."""
        records = classify_all(["[FEATURE] a", "[BUG_FIX] b"])

        assert [r.change_tag for r in records] == [ChangeTag.FEATURE, ChangeTag.BUG_FIX]


class TestExtractVersion:
    """Tests for extract_version()."""

    def test_production(self):
        """Extract a production version."""
        assert extract_version("[VERSION_CHANGE] 3.0.1") == Version(3, 0, 1)

    def test_with_leading_markers(self):
        """Markers before the tag are ignored."""
        assert extract_version("[INITIAL_COMMIT] [VERSION_CHANGE] 0.1.0-dev") == Version(0, 1, 0, "dev")

    def test_surrounding_whitespace(self):
        """Trailing whitespace is stripped."""
        assert extract_version("[VERSION_CHANGE] 2.0.0\n") == Version(2, 0, 0)

    @pytest.mark.parametrize(
        "message",
        [
            "[FEATURE] 1.0.0",
            "[VERSION_CHANGE]",
            "[VERSION_CHANGE] 1.0",
            "[VERSION_CHANGE] 1.0.0 and more",
            "[VERSION_CHANGE] 0.1.0",
        ],
    )
    def test_no_version(self, message: str):
        """Missing or malformed versions yield None."""
        assert extract_version(message) is None


class TestIsVersionable:
    """Tests for is_versionable()."""

    def test_empty(self):
        """An empty history is not versionable."""
        assert not is_versionable([])

    def test_any_versionable(self):
        """One versionable commit is enough."""
        assert is_versionable(["[DOC] docs", "[PERF] faster"])

    def test_none_versionable(self):
        """Only non-versionable commits."""
        assert not is_versionable(["[DOC] docs", "[VERSION_CHANGE] 1.0.0", "untagged"])

    def test_string_rejected(self):
        """A single string is not a list of messages."""
        with pytest.raises(IllegalArgumentError):
            is_versionable("[FEATURE] a")


class TestFilterChangelogCommits:
    """Tests for filter_changelog_commits()."""

    def test_keeps_versionable_and_version_changes(self):
        """Only commits relevant to a changelog remain."""
        messages = [
            "[VERSION_CHANGE] 1.0.1",
            "[DOC] docs",
            "[BUG_FIX] fix",
            "[BREAKING] [CHORE] cleanup",
            "untagged",
        ]

        assert filter_changelog_commits(messages) == [
            "[VERSION_CHANGE] 1.0.1",
            "[BUG_FIX] fix",
            "[BREAKING] [CHORE] cleanup",
        ]


class TestFormatCommitMessage:
    """Tests for format_commit_message()."""

    def test_simple(self):
        """Subject is the tag followed by the message."""
        assert format_commit_message(ChangeTag.BUG_FIX, "Fixed it") == "[BUG_FIX] Fixed it"

    def test_change_tag_by_name(self):
        """The change tag may be given by name."""
        assert format_commit_message("feature", "Added it") == "[FEATURE] Added it"

    def test_marker_order(self):
        """Markers precede the change tag in a fixed order."""
        message = format_commit_message(
            ChangeTag.VERSION_CHANGE,
            "1.0.0",
            is_breaking=True,
            is_initial_commit=True,
            insert_ci_skip=True,
        )

        assert message == "[INITIAL_COMMIT] [BREAKING] [ci-skip] [VERSION_CHANGE] 1.0.0"

    def test_long_message(self):
        """The body is separated by a blank line."""
        message = format_commit_message(ChangeTag.FEATURE, "Added it", "  Details here.  ")

        assert message == "[FEATURE] Added it\n\nDetails here."
        assert classify(message).long_message == "Details here."

    def test_truncation(self, caplog: pytest.LogCaptureFixture):
        """Overlong messages are truncated and logged."""
        with caplog.at_level(logging.INFO, logger="tagver"):
            message = format_commit_message(
                ChangeTag.DOC, "x" * 70, "y" * 20, max_short_length=60, max_long_length=10
            )

        assert message == f"[DOC] {'x' * 60}\n\n{'y' * 10}"
        assert "truncated" in caplog.text

    @pytest.mark.parametrize("short", ["", "   "])
    def test_blank_short_message(self, short: str):
        """A blank subject is rejected."""
        with pytest.raises(IllegalArgumentError):
            format_commit_message(ChangeTag.FEATURE, short)

    def test_blank_long_message(self):
        """A whitespace-only body is rejected."""
        with pytest.raises(IllegalArgumentError):
            format_commit_message(ChangeTag.FEATURE, "ok", "   ")

    def test_unknown_change_tag(self):
        """Unknown change types are rejected."""
        with pytest.raises(IllegalArgumentError):
            format_commit_message("bugfix", "ok")
