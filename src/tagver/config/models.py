"""Configuration models for tagver.

Settings live in the ``[tool.tagver]`` table of ``pyproject.toml``::

    [tool.tagver]
    production_branch = "main"
    strategy = "collective"
    dev_appendage = "snapshot"

    [tool.tagver.changelog]
    path = "docs/CHANGELOG.md"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tagver.core.changelog import DEFAULT_CHANGELOG_FILENAME
from tagver.core.commits import MAX_LONG_MESSAGE_LENGTH, MAX_SHORT_MESSAGE_LENGTH
from tagver.core.version import AppendageType, StrategyType
from tagver.exceptions import IllegalArgumentError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ChangelogConfig(BaseModel):
    """Changelog generation settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    path: Path = Path(DEFAULT_CHANGELOG_FILENAME)


class CommitConfig(BaseModel):
    """Commit message composition limits."""

    model_config = ConfigDict(extra="forbid")

    max_short_length: int = Field(default=MAX_SHORT_MESSAGE_LENGTH, gt=0)
    max_long_length: int = Field(default=MAX_LONG_MESSAGE_LENGTH, ge=0)


class TagverConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    production_branch: str = Field(default="master", min_length=1)
    strategy: StrategyType = StrategyType.SEQUENTIAL
    dev_appendage: AppendageType = AppendageType.BRANCH_NAME
    log_level: str = "INFO"
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    commits: CommitConfig = Field(default_factory=CommitConfig)

    @field_validator("strategy", mode="before")
    @classmethod
    def _parse_strategy(cls, value: Any) -> Any:
        return _enum_from_name(StrategyType, value)

    @field_validator("dev_appendage", mode="before")
    @classmethod
    def _parse_appendage(cls, value: Any) -> Any:
        return _enum_from_name(AppendageType, value)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def changelog_path(self) -> Path:
        return self.changelog.path


def _enum_from_name(enum_cls: Any, value: Any) -> Any:
    if isinstance(value, str):
        try:
            return enum_cls.from_name(value)
        except IllegalArgumentError as e:
            raise ValueError(str(e)) from e
    return value
