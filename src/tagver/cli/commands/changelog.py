"""Implementation of the 'changelog' command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from tagver.cli.commands import open_project, resolve_prod_branch
from tagver.core.changelog import generate
from tagver.exceptions import TagverError

if TYPE_CHECKING:
    from rich.console import Console


def run_changelog(
    path: str | None,
    changelog_path: str | None,
    prod_branch: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the changelog command.

    Args:
        path: Optional path to project directory
        changelog_path: Changelog file override, relative to the project
        prod_branch: Production branch override
        console: Console for standard output
        err_console: Console for error output
    """
    project_path, config, repo = open_project(path, err_console)
    prod_branch = resolve_prod_branch(repo, config, prod_branch, err_console)

    if not config.changelog.enabled and changelog_path is None:
        console.print("[yellow]Changelog generation is disabled in the configuration.[/]")
        return

    target = project_path / (Path(changelog_path) if changelog_path else config.changelog_path)

    try:
        written = generate(repo, target, prod_branch)
    except TagverError as e:
        err_console.print(f"[red]Error generating changelog:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if written:
        console.print(f"  [green]✓[/] Updated {target.name}")
    else:
        console.print("[yellow]There wasn't anything to add to the changelog.[/]")
