"""Implementation of the 'commit' command.

Composes a commit message in the tag convention and commits the staged
changes. Version change commits have their proposed version validated first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from tagver.cli.commands import open_project, resolve_prod_branch
from tagver.core.calculator import apply_appendage, determine
from tagver.core.commits import ChangeTag, format_commit_message
from tagver.core.validator import check_proposed_version, validate_version
from tagver.core.version import (
    STARTING_INITIAL_DEV_VERSION,
    STARTING_PROD_VERSION,
    AppendageType,
    StrategyType,
    Version,
)
from tagver.exceptions import TagverError

if TYPE_CHECKING:
    from rich.console import Console

    from tagver.config import TagverConfig
    from tagver.vcs import GitRepository


def run_commit(
    path: str | None,
    change_type: str,
    short_msg: str | None,
    long_msg: str | None,
    new_version: str | None,
    is_breaking: bool,
    is_initial_commit: bool,
    insert_ci_skip: bool,
    strategy: str | None,
    dev_appendage: str | None,
    prod_branch: str | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the commit command.

    Args:
        path: Optional path to project directory
        change_type: Change tag name (e.g. "bug_fix")
        short_msg: Subject text (ignored for version changes)
        long_msg: Optional body (ignored for version changes)
        new_version: The version to record (version changes only)
        is_breaking: Mark the commit as a breaking change
        is_initial_commit: Mark the commit as the branch's initial commit
        insert_ci_skip: Add the [ci-skip] marker
        strategy: Strategy override used for the calculated version
        dev_appendage: Appendage override used for the calculated version
        prod_branch: Production branch override
        dry_run: Only show the message that would be committed
        console: Console for standard output
        err_console: Console for error output
    """
    _, config, repo = open_project(path, err_console)
    prod_branch = resolve_prod_branch(repo, config, prod_branch, err_console)

    try:
        tag = ChangeTag.from_name(change_type)

        if is_initial_commit and repo.get_commit_count() > 0:
            err_console.print(
                f"[red]Error:[/] The current branch [cyan]{repo.get_current_branch()}[/] already has "
                "commits. In order to make an Initial Commit, the current branch must be empty."
            )
            raise SystemExit(1)

        if tag is ChangeTag.VERSION_CHANGE:
            if not new_version:
                err_console.print("[red]Error:[/] The version is required for the version change type.")
                raise SystemExit(1)
            _validate_new_version(
                repo,
                config,
                new_version,
                is_initial_commit,
                StrategyType.from_name(strategy) if strategy else config.strategy,
                AppendageType.from_name(dev_appendage) if dev_appendage else config.dev_appendage,
                prod_branch,
                console,
                err_console,
            )
            subject, body = new_version, ""
        elif short_msg:
            subject, body = short_msg, long_msg or ""
        else:
            err_console.print(
                f"[red]Error:[/] The short commit message is required for the "
                f"[cyan]{tag.name.lower()}[/] change type."
            )
            raise SystemExit(1)

        message = format_commit_message(
            tag,
            subject,
            body,
            is_breaking=is_breaking,
            is_initial_commit=is_initial_commit,
            insert_ci_skip=insert_ci_skip,
            max_short_length=config.commits.max_short_length,
            max_long_length=config.commits.max_long_length,
        )

        if dry_run:
            console.print(
                Panel(
                    Text(message),
                    title="[yellow]Dry Run Preview[/]",
                    border_style="yellow",
                )
            )
            console.print("\n[dim]Run without [cyan]--dry-run[/] to create this commit.[/]")
            return

        repo.create_commit(message)
    except TagverError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    console.print("  [green]✓[/] Successfully created commit.")


def _validate_new_version(
    repo: GitRepository,
    config: TagverConfig,
    new_version: str,
    is_initial_commit: bool,
    strategy: StrategyType,
    appendage_type: AppendageType,
    prod_branch: str,
    console: Console,
    err_console: Console,
) -> None:
    problem = check_proposed_version(new_version)
    if problem:
        err_console.print(f"[red]Error:[/] {escape(problem)}")
        raise SystemExit(1)

    current_branch = repo.get_current_branch()
    last_prod = None
    calculated: Version

    if not is_initial_commit:
        last_prod = repo.get_last_prod_version()
        calculated = determine(repo, last_prod, strategy, appendage_type, prod_branch)
    elif current_branch == prod_branch:
        calculated = STARTING_PROD_VERSION
    else:
        calculated = apply_appendage(STARTING_INITIAL_DEV_VERSION, current_branch, appendage_type)

    result = validate_version(
        last_prod.version if last_prod else None,
        new_version,
        calculated,
        current_branch,
        prod_branch,
    )

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/] {escape(warning)}")
    if not result:
        err_console.print(f"[red]Invalid version:[/] {escape(result.reason)}")
        raise SystemExit(1)
    for note in result.notes:
        console.print(f"[dim]{escape(note)}[/]")
