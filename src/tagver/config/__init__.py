"""Configuration management for tagver."""

from __future__ import annotations

from tagver.config.loader import load_config
from tagver.config.models import (
    ChangelogConfig,
    CommitConfig,
    TagverConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitConfig",
    "TagverConfig",
    "load_config",
]
