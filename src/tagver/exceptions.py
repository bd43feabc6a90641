"""Exception hierarchy for tagver.

Errors fall into three families that callers treat differently:

- argument errors (``IllegalArgumentError``): a function was called with
  malformed or missing input
- formatting errors (``VersionFormattingError``): a version string does not
  follow the supported grammar; the remedy is to fix the input or message
- data errors (``InvalidGitDataError``): the commit history itself breaks an
  invariant; the remedy is to fix history

Validation failures of a proposed version are not exceptions; see
``tagver.core.validator.ValidationResult``.
"""

from __future__ import annotations


class TagverError(Exception):
    """Base class for all tagver errors."""


class IllegalArgumentError(TagverError, ValueError):
    """An operation received an invalid argument."""


class VersionFormattingError(TagverError):
    """A version string does not meet the supported version grammar."""


class InvalidGitDataError(TagverError):
    """The commit history violates an invariant the engine relies on."""


class GitError(TagverError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}\n\n{self.stderr.strip()}"
        return base


class ChangelogError(TagverError):
    """Reading or writing the changelog failed."""


class ConfigError(TagverError):
    """Base class for configuration problems."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """The [tool.tagver] table contains invalid values."""
