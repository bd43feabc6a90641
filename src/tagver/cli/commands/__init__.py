"""Implementations of the tagver sub-commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from tagver.config import TagverConfig, load_config
from tagver.exceptions import TagverError
from tagver.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console


def open_project(path: str | None, err_console: Console) -> tuple[Path, TagverConfig, GitRepository]:
    """Load configuration and the git repository for ``path``.

    Exits with status 1 if either cannot be loaded.
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
    except Exception as e:
        err_console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    # --log-level on the command line takes precedence
    package_logger = logging.getLogger("tagver")
    if package_logger.level == logging.NOTSET:
        package_logger.setLevel(config.log_level)

    repo = GitRepository(project_path)
    try:
        is_repository = repo.is_repository()
    except TagverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if not is_repository:
        err_console.print(f"[red]Error:[/] {escape(str(project_path))} is not inside a git repository.")
        raise SystemExit(1)

    return project_path, config, repo


def resolve_prod_branch(
    repo: GitRepository, config: TagverConfig, override: str | None, err_console: Console
) -> str:
    """Return the production branch, preferring ``override`` over the config.

    Exits with status 1 if git rejects the name as a branch name.
    """
    prod_branch = override or config.production_branch
    try:
        valid = repo.check_reference(prod_branch)
    except TagverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if not valid:
        err_console.print(
            f"[red]Error:[/] The production branch name {escape(repr(prod_branch))} is not a "
            "valid git branch name."
        )
        raise SystemExit(1)
    return prod_branch
