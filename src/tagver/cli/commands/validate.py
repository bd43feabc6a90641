"""Implementation of the 'validate' command.

Checks a proposed version against the last production version, the
calculated version and the branch policy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from tagver.cli.commands import open_project, resolve_prod_branch
from tagver.core.calculator import determine
from tagver.core.validator import check_proposed_version, validate_version
from tagver.core.version import AppendageType, StrategyType
from tagver.exceptions import TagverError

if TYPE_CHECKING:
    from rich.console import Console


def run_validate(
    path: str | None,
    proposed: str,
    strategy: str | None,
    dev_appendage: str | None,
    prod_branch: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the validate command.

    Args:
        path: Optional path to project directory
        proposed: The version to validate
        strategy: Strategy override used for the calculated version
        dev_appendage: Appendage override used for the calculated version
        prod_branch: Production branch override
        console: Console for standard output
        err_console: Console for error output
    """
    problem = check_proposed_version(proposed)
    if problem:
        err_console.print(f"[red]Error:[/] {escape(problem)}")
        raise SystemExit(1)

    _, config, repo = open_project(path, err_console)
    prod_branch = resolve_prod_branch(repo, config, prod_branch, err_console)

    try:
        last_prod = repo.get_last_prod_version()
        calculated = determine(
            repo,
            last_prod,
            StrategyType.from_name(strategy) if strategy else config.strategy,
            AppendageType.from_name(dev_appendage) if dev_appendage else config.dev_appendage,
            prod_branch,
        )
        result = validate_version(
            last_prod.version if last_prod else None,
            proposed,
            calculated,
            repo.get_current_branch(),
            prod_branch,
        )
    except TagverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/] {escape(warning)}")

    if not result:
        err_console.print(f"[red]Invalid version:[/] {escape(result.reason)}")
        raise SystemExit(1)

    for note in result.notes:
        console.print(f"[dim]{escape(note)}[/]")
    console.print(f"[green]✓[/] {escape(proposed)} passed all applicable validation checks.")
