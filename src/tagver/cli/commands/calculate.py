"""Implementation of the 'calculate' command.

Prints the version the current branch should carry next.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape

from tagver.cli.commands import open_project, resolve_prod_branch
from tagver.core.calculator import determine
from tagver.core.version import AppendageType, StrategyType
from tagver.exceptions import TagverError

if TYPE_CHECKING:
    from rich.console import Console


def run_calculate(
    path: str | None,
    strategy: str | None,
    dev_appendage: str | None,
    prod_branch: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the calculate command.

    Args:
        path: Optional path to project directory
        strategy: Strategy override (sequential or collective)
        dev_appendage: Appendage override (branch_name or snapshot)
        prod_branch: Production branch override
        console: Console for standard output
        err_console: Console for error output
    """
    _, config, repo = open_project(path, err_console)
    prod_branch = resolve_prod_branch(repo, config, prod_branch, err_console)

    try:
        version = determine(
            repo,
            repo.get_last_prod_version(),
            StrategyType.from_name(strategy) if strategy else config.strategy,
            AppendageType.from_name(dev_appendage) if dev_appendage else config.dev_appendage,
            prod_branch,
        )
    except TagverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    console.print(str(version), highlight=False)
