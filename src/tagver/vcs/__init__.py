"""Version control access."""

from __future__ import annotations

from tagver.vcs.git import GitRepository, HistorySource, ReleasePoint

__all__ = [
    "GitRepository",
    "HistorySource",
    "ReleasePoint",
]
