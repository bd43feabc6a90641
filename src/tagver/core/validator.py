"""Validation of a proposed (user supplied) version."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tagver.core.version import Version, is_version, require_branch_name
from tagver.exceptions import IllegalArgumentError, VersionFormattingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a proposed version.

    Attributes:
        is_valid: Whether the proposed version may be recorded
        reason: Why validation failed (None when valid)
        warnings: Non-fatal problems, e.g. degraded validation
        notes: Informational remarks, e.g. divergence from the calculated version
    """

    is_valid: bool
    reason: str | None = None
    warnings: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.is_valid


def _coerce(value: Version | str | None, name: str, *, allow_empty: bool = False) -> Version | None:
    if value is None or value == "":
        if allow_empty:
            return None
        raise IllegalArgumentError(f"Missing {name} version.")
    if isinstance(value, Version):
        return value
    if not isinstance(value, str):
        raise IllegalArgumentError(f"Invalid {name} version: {value!r}")
    try:
        return Version.parse(value)
    except VersionFormattingError as e:
        raise IllegalArgumentError(f"Invalid {name} version: {value!r}") from e


def validate_version(
    last_prod_version: Version | str | None,
    proposed: Version | str,
    calculated: Version | str,
    current_branch: str,
    prod_branch: str,
) -> ValidationResult:
    """Check a proposed version against history and branch policy.

    Checks run in order and the first failure wins:

    1. the proposed version must differ from the last production version
    2. it must rank above the last production version
    3. on the production branch it must be a production version (checked even
       when no production version is known)
    4. off the production branch it must carry an appendage

    When no production version is known, checks against history are skipped
    and a warning is recorded instead.

    Args:
        last_prod_version: Last recorded production version, None/"" if unknown
        proposed: Version the user wants to record
        calculated: Version the calculator recommends
        current_branch: Current branch name
        prod_branch: Production branch name

    Returns:
        ValidationResult

    Raises:
        IllegalArgumentError: If any argument is malformed
    """
    last = _coerce(last_prod_version, "last production", allow_empty=True)
    if last is not None and not last.is_production:
        raise IllegalArgumentError(f"Last production version {last} is not a production version.")
    proposed_version = _coerce(proposed, "proposed")
    calculated_version = _coerce(calculated, "calculated")
    require_branch_name(current_branch, "current")
    require_branch_name(prod_branch, "production")

    reason = None
    warnings: list[str] = []
    on_prod_branch = current_branch == prod_branch

    if last is not None and proposed_version == last:
        reason = (
            f"The specified version {proposed_version} is the same as the last recorded "
            "production version."
        )
    elif last is not None and not proposed_version > last:
        reason = (
            f"The specified version {proposed_version} is lower than {last}, the last recorded "
            "production version."
        )
    elif on_prod_branch and not proposed_version.is_production:
        reason = (
            f"The specified version {proposed_version} is not in a valid format for a "
            "production branch."
        )
    elif last is not None and not on_prod_branch and proposed_version.is_production:
        reason = (
            f"The specified version {proposed_version} is not in a valid format for a "
            "development branch."
        )
    elif last is None:
        warnings.append(
            "There is no production version change commit found in this branch to compare "
            f"against {proposed_version}, the specified version. Therefore, version validation "
            "has been degraded."
        )

    if reason is not None:
        logger.debug(reason)
        return ValidationResult(is_valid=False, reason=reason, warnings=warnings)

    for warning in warnings:
        logger.debug(warning)

    notes: list[str] = []
    if proposed_version == calculated_version:
        logger.debug("The specified version %s is the same as the calculated version.", proposed_version)
    else:
        notes.append(
            f"The specified version {proposed_version} doesn't match {calculated_version}, the "
            "calculated version. Please use caution as this could cause undesired results."
        )
        logger.debug(notes[-1])

    return ValidationResult(is_valid=True, warnings=warnings, notes=notes)


def is_valid(
    last_prod_version: Version | str | None,
    proposed: Version | str,
    calculated: Version | str,
    current_branch: str,
    prod_branch: str,
) -> bool:
    """Return only the verdict of ``validate_version``."""
    return validate_version(last_prod_version, proposed, calculated, current_branch, prod_branch).is_valid


def check_proposed_version(text: str) -> str | None:
    """Explain why a proposed version string cannot be used at all.

    Returns:
        A human readable reason, or None when the string is a valid version
    """
    if not isinstance(text, str) or not text:
        return "A version is required."
    if is_version(text):
        return None
    if not text.strip():
        return "The specified version must be more than just spaces."
    if " " in text:
        return "The specified version cannot contain spaces."
    return (
        f"The specified version {text} does not meet semantic version formatting standards "
        "(see https://semver.org for more details). However, it is possible that an initial "
        "development version (e.g. 0.1.0-latest) was specified without a development version "
        "appendage (e.g. 0.1.0-APPENDAGE_TYPE), a standard specifically enforced by this tool."
    )
