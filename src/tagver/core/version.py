"""Version parsing, comparison and serialisation.

tagver enforces one opinionated grammar with three forms:

- production: ``MAJOR.MINOR.PATCH`` (``MAJOR >= 1``)
- initial development: ``0.MINOR.0-APPENDAGE`` (``MINOR >= 1``)
- regular development: ``MAJOR.MINOR.PATCH-APPENDAGE`` (``MAJOR >= 1``)

Numeric components never carry leading zeros. The appendage is a single
non-whitespace token, normally the branch name or ``SNAPSHOT``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from tagver.exceptions import IllegalArgumentError, VersionFormattingError

_NUMBER = r"(?:0|[1-9]\d*)"
_POSITIVE = r"[1-9]\d*"

# Tried in this order so that 0.x.0-* inputs resolve to initial development
_INITIAL_DEV_PATTERN = re.compile(
    rf"^(?P<major>0)\.(?P<minor>{_POSITIVE})\.(?P<patch>0)-(?P<appendage>\S+)$"
)
_DEV_PATTERN = re.compile(
    rf"^(?P<major>{_POSITIVE})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})-(?P<appendage>\S+)$"
)
_PROD_PATTERN = re.compile(rf"^(?P<major>{_POSITIVE})\.(?P<minor>{_NUMBER})\.(?P<patch>{_NUMBER})$")


class VersionGrammar(str, Enum):
    """The three accepted version forms."""

    INITIAL_DEVELOPMENT = "initial_development"
    DEVELOPMENT = "development"
    PRODUCTION = "production"


_GRAMMARS: tuple[tuple[VersionGrammar, re.Pattern[str]], ...] = (
    (VersionGrammar.INITIAL_DEVELOPMENT, _INITIAL_DEV_PATTERN),
    (VersionGrammar.DEVELOPMENT, _DEV_PATTERN),
    (VersionGrammar.PRODUCTION, _PROD_PATTERN),
)


class _NamedEnum(Enum):
    """Enum with a case-insensitive lookup by member name."""

    @classmethod
    def from_name(cls, name: str):
        if isinstance(name, cls):
            return name
        if not isinstance(name, str) or not name.strip():
            raise IllegalArgumentError(f"Invalid {cls.__name__} name: {name!r}")
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(m.name.lower() for m in cls)
            raise IllegalArgumentError(
                f"Unknown {cls.__name__} {name!r}. Expected one of: {choices}"
            ) from None


class StrategyType(_NamedEnum):
    """How consecutive commits of the same kind contribute to a bump."""

    SEQUENTIAL = "sequential"
    COLLECTIVE = "collective"


class AppendageType(_NamedEnum):
    """What is appended after ``-`` to a development version."""

    BRANCH_NAME = "branch_name"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True, eq=True)
class Version:
    """An immutable parsed version.

    Ordering follows the numeric triple; on a tie a version without an
    appendage ranks above one with an appendage, so ``4.0.0 > 4.0.0-latest``.
    Two versions that differ only in their appendage rank equal.
    """

    major: int
    minor: int
    patch: int
    appendage: str | None = None

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string.

        Args:
            text: Version string such as ``1.2.3`` or ``0.1.0-main``

        Returns:
            Parsed Version

        Raises:
            VersionFormattingError: If the string matches none of the grammars
        """
        if not isinstance(text, str):
            raise IllegalArgumentError(f"Version must be a string, got {type(text).__name__}")

        for _grammar, pattern in _GRAMMARS:
            match = pattern.fullmatch(text)
            if match:
                return cls(
                    major=int(match.group("major")),
                    minor=int(match.group("minor")),
                    patch=int(match.group("patch")),
                    appendage=match.groupdict().get("appendage"),
                )

        raise VersionFormattingError(
            f"The version {text!r} does not meet semantic version formatting standards "
            "(see https://semver.org for more details)."
        )

    @property
    def grammar(self) -> VersionGrammar | None:
        """The grammar this version serialises to, or None for a bare ``0.x.y``."""
        text = str(self)
        for grammar, pattern in _GRAMMARS:
            if pattern.fullmatch(text):
                return grammar
        return None

    @property
    def is_production(self) -> bool:
        return self.grammar is VersionGrammar.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.grammar in (VersionGrammar.INITIAL_DEVELOPMENT, VersionGrammar.DEVELOPMENT)

    def with_appendage(self, appendage: str) -> Version:
        """Return a copy of this version carrying ``appendage``."""
        if not appendage or any(ch.isspace() for ch in appendage):
            raise IllegalArgumentError(f"Invalid version appendage: {appendage!r}")
        return replace(self, appendage=appendage)

    def _sort_key(self) -> tuple[int, int, int, int]:
        return (self.major, self.minor, self.patch, 0 if self.appendage else 1)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        return f"{core}-{self.appendage}" if self.appendage else core


STARTING_INITIAL_DEV_VERSION = Version(0, 1, 0)
STARTING_PROD_VERSION = Version(1, 0, 0)


def parse_version(text: str) -> Version:
    """Parse a version string (see ``Version.parse``)."""
    return Version.parse(text)


def is_version(text: str, grammar: VersionGrammar | None = None) -> bool:
    """Check whether ``text`` matches the version grammar.

    Args:
        text: Candidate version string
        grammar: Restrict the check to one grammar; any grammar when None
    """
    if not isinstance(text, str):
        return False
    for candidate, pattern in _GRAMMARS:
        if grammar is not None and candidate is not grammar:
            continue
        if pattern.fullmatch(text):
            return True
    return False


def require_branch_name(value: str, name: str) -> str:
    """Return ``value`` if it is a usable branch name.

    Raises:
        IllegalArgumentError: If ``value`` is not a string or is blank
    """
    if not isinstance(value, str) or not value.strip():
        raise IllegalArgumentError(f"Invalid {name} branch name: {value!r}")
    return value


def is_greater(version_a: Version | str, version_b: Version | str) -> bool:
    """Return True if ``version_a`` ranks strictly above ``version_b``."""
    a = version_a if isinstance(version_a, Version) else Version.parse(version_a)
    b = version_b if isinstance(version_b, Version) else Version.parse(version_b)
    return a > b
