"""Core business logic for tagver.

This module contains the fundamental building blocks:
- Version parsing and ordering
- Commit message classification
- Next-version calculation and validation
- Changelog assembly
"""

from __future__ import annotations

from tagver.core.calculator import (
    apply_appendage,
    calculate_initial_dev,
    calculate_regular,
    determine,
)
from tagver.core.changelog import assemble_additions, generate, get_last_version
from tagver.core.commits import (
    ChangeTag,
    CommitRecord,
    classify,
    extract_version,
    format_commit_message,
    is_versionable,
)
from tagver.core.validator import ValidationResult, is_valid, validate_version
from tagver.core.version import AppendageType, StrategyType, Version, is_greater, parse_version

__all__ = [
    "AppendageType",
    "ChangeTag",
    "CommitRecord",
    "StrategyType",
    "ValidationResult",
    "Version",
    "apply_appendage",
    "assemble_additions",
    "calculate_initial_dev",
    "calculate_regular",
    "classify",
    "determine",
    "extract_version",
    "format_commit_message",
    "generate",
    "get_last_version",
    "is_greater",
    "is_valid",
    "is_versionable",
    "parse_version",
    "validate_version",
]
