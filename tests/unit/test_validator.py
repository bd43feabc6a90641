"""Tests for proposed version validation."""

from __future__ import annotations

import logging

import pytest

from tagver.core.validator import (
    ValidationResult,
    check_proposed_version,
    is_valid,
    validate_version,
)
from tagver.core.version import Version
from tagver.exceptions import IllegalArgumentError


class TestValidateVersion:
    """Tests for validate_version()."""

    def test_same_as_last_production(self):
        """Re-recording the last production version is rejected."""
        result = validate_version("1.0.0", "1.0.0", "1.0.0", "master", "master")

        assert isinstance(result, ValidationResult)
        assert not result
        assert "same as the last recorded production version" in result.reason

    def test_lower_than_last_production(self):
        """A lower version is rejected."""
        result = validate_version("2.0.0", "1.9.9", "2.0.1", "master", "master")

        assert not result.is_valid
        assert "lower than 2.0.0" in result.reason

    def test_development_of_last_production(self):
        """2.0.0-dev ranks below 2.0.0 and is rejected."""
        result = validate_version("2.0.0", "2.0.0-dev", "2.0.1-dev", "dev", "master")

        assert not result.is_valid

    def test_production_branch_requires_production_version(self):
        """Development versions are rejected on the production branch."""
        result = validate_version("2.0.0", "2.0.1-dev", "2.0.1", "master", "master")

        assert not result.is_valid
        assert "production branch" in result.reason

    def test_production_branch_check_without_history(self):
        """The production format check applies without a known production version."""
        result = validate_version(None, "0.1.0-dev", "1.0.0", "master", "master")

        assert not result.is_valid
        assert "production branch" in result.reason

    def test_development_branch_requires_appendage(self):
        """Production versions are rejected off the production branch."""
        result = validate_version("2.0.0", "2.0.1", "2.0.1-feature", "feature", "master")

        assert not result.is_valid
        assert "development branch" in result.reason

    def test_degraded_without_history(self, caplog: pytest.LogCaptureFixture):
        """Without a production version, validation passes with a warning."""
        with caplog.at_level(logging.DEBUG, logger="tagver"):
            result = validate_version("", "0.1.0-feature", "0.1.0-feature", "feature", "master")

        assert result.is_valid
        assert len(result.warnings) == 1
        assert "degraded" in result.warnings[0]
        assert "degraded" in caplog.text

    def test_valid_matching_calculated(self):
        """A valid version equal to the calculated one has no notes."""
        result = validate_version("1.0.0", "1.0.1-feature", "1.0.1-feature", "feature", "master")

        assert result
        assert result.reason is None
        assert result.warnings == []
        assert result.notes == []

    def test_valid_diverging_from_calculated(self):
        """Diverging from the calculated version is allowed but noted."""
        result = validate_version(
            Version(1, 0, 0), Version(1, 1, 0, "feature"), Version(1, 0, 1, "feature"), "feature", "master"
        )

        assert result.is_valid
        assert len(result.notes) == 1
        assert "1.0.1-feature" in result.notes[0]

    def test_valid_production_release(self):
        """A higher production version on the production branch."""
        assert validate_version("1.0.0", "2.0.0", "2.0.0", "master", "master").is_valid

    @pytest.mark.parametrize(
        ("last", "proposed", "calculated", "current", "prod"),
        [
            ("1.0.0-dev", "1.0.1", "1.0.1", "master", "master"),
            ("1.0.0", "", "1.0.1", "master", "master"),
            ("1.0.0", "1.0.1", "not.a.version", "master", "master"),
            ("1.0.0", "1.0.1", "1.0.1", "", "master"),
            ("1.0.0", "1.0.1", "1.0.1", "master", "   "),
            ("1.0.0", 101, "1.0.1", "master", "master"),
        ],
    )
    def test_argument_errors(self, last, proposed, calculated, current, prod):
        """Malformed arguments raise IllegalArgumentError."""
        with pytest.raises(IllegalArgumentError):
            validate_version(last, proposed, calculated, current, prod)


class TestIsValid:
    """Tests for is_valid()."""

    def test_verdict(self):
        """Only the verdict is returned."""
        assert is_valid("1.0.0", "1.0.0", "1.0.0", "master", "master") is False
        assert is_valid("1.0.0", "1.0.1", "1.0.1", "master", "master") is True


class TestCheckProposedVersion:
    """Tests for check_proposed_version()."""

    def test_valid(self):
        """Valid versions have no problem."""
        assert check_proposed_version("1.0.0") is None
        assert check_proposed_version("0.1.0-dev") is None

    def test_empty(self):
        """An empty version is required."""
        assert check_proposed_version("") == "A version is required."

    def test_only_spaces(self):
        """Whitespace-only input."""
        assert "more than just spaces" in check_proposed_version("   ")

    def test_contains_spaces(self):
        """Embedded spaces."""
        assert "cannot contain spaces" in check_proposed_version("1.0 .0")

    def test_initial_development_without_appendage(self):
        """The hint mentions the missing appendage."""
        problem = check_proposed_version("0.1.0")

        assert "semver.org" in problem
        assert "APPENDAGE" in problem
