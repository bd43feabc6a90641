"""Command line entry point for tagver."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from rich.console import Console
from rich.logging import RichHandler

from tagver import __version__
from tagver.config.models import LOG_LEVELS
from tagver.core.commits import ChangeTag
from tagver.core.version import AppendageType, StrategyType

STRATEGY_NAMES = [s.name.lower() for s in StrategyType]
APPENDAGE_NAMES = [a.name.lower() for a in AppendageType]
CHANGE_TYPE_NAMES = [t.name.lower() for t in ChangeTag]


def _add_calculation_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-s", "--strategy", type=str.lower, choices=STRATEGY_NAMES, help="Versioning strategy"
    )
    parser.add_argument(
        "-a", "--dev-appendage", type=str.lower, choices=APPENDAGE_NAMES,
        help="Development version appendage",
    )
    parser.add_argument("-p", "--prod-branch", type=str, metavar="BRANCH", help="Production branch name")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagver",
        description="Tag-based commit conventions, version calculation and changelogs",
        epilog="Example: tagver calculate --strategy collective",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-C", "--directory", type=str, metavar="PATH", help="Project directory (default: current)"
    )
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, help="Logging level (default: from config)"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    calculate = subparsers.add_parser("calculate", help="Print the next version")
    _add_calculation_options(calculate)

    validate = subparsers.add_parser("validate", help="Validate a proposed version")
    validate.add_argument("proposed", metavar="VERSION", help="Version to validate")
    _add_calculation_options(validate)

    changelog = subparsers.add_parser("changelog", help="Create or update the changelog")
    changelog.add_argument("--path", type=str, metavar="FILE", help="Changelog file (default: from config)")
    changelog.add_argument("-p", "--prod-branch", type=str, metavar="BRANCH", help="Production branch name")

    commit = subparsers.add_parser("commit", help="Create a tagged commit from the staged changes")
    commit.add_argument(
        "-t", "--change-type", type=str.lower, choices=CHANGE_TYPE_NAMES, required=True,
        help="Change type tag",
    )
    message = commit.add_mutually_exclusive_group(required=True)
    message.add_argument("-m", "--short-msg", type=str, metavar="TEXT", help="Short commit message")
    message.add_argument("-n", "--new-version", type=str, metavar="VERSION", help="Version to record")
    commit.add_argument("-l", "--long-msg", type=str, metavar="TEXT", help="Long commit message")
    commit.add_argument("-b", "--breaking", action="store_true", help="Mark as a breaking change")
    commit.add_argument("-i", "--initial-commit", action="store_true", help="Mark as the initial commit")
    commit.add_argument("--ci-skip", action="store_true", help="Add the [ci-skip] marker")
    commit.add_argument("--dry-run", action="store_true", help="Show the message without committing")
    _add_calculation_options(commit)

    return parser


def setup_logging(level: str | None, console: Console) -> None:
    """Route the package logger through rich."""
    logger = logging.getLogger("tagver")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_time=False, show_path=False))
    logger.setLevel(level or logging.NOTSET)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    console = Console()
    err_console = Console(stderr=True)
    setup_logging(args.log_level, err_console)

    # Deferred so --help and --version stay fast
    from tagver.cli.commands.calculate import run_calculate
    from tagver.cli.commands.changelog import run_changelog
    from tagver.cli.commands.commit import run_commit
    from tagver.cli.commands.validate import run_validate

    try:
        if args.command == "calculate":
            run_calculate(
                args.directory, args.strategy, args.dev_appendage, args.prod_branch,
                console, err_console,
            )
        elif args.command == "validate":
            run_validate(
                args.directory, args.proposed, args.strategy, args.dev_appendage,
                args.prod_branch, console, err_console,
            )
        elif args.command == "changelog":
            run_changelog(args.directory, args.path, args.prod_branch, console, err_console)
        elif args.command == "commit":
            run_commit(
                args.directory,
                args.change_type,
                args.short_msg,
                args.long_msg,
                args.new_version,
                args.breaking,
                args.initial_commit,
                args.ci_skip,
                args.strategy,
                args.dev_appendage,
                args.prod_branch,
                args.dry_run,
                console,
                err_console,
            )
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled.[/]")
        return 130

    return 0
