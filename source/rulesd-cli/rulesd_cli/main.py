"""Main entry point for rules.d CLI."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from rulesd_core.config import Settings, configure_logging
from rulesd_core.rules import RuleCategory, ScenarioFocus

from rulesd_cli.colors import COLORS
from rulesd_cli.commands import COMMAND_HANDLERS


logger = logging.getLogger(__name__)

console = Console(highlight=False)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="rulesd",
        description="rules.d CLI - browse rule documents and recommend rule bundles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--rules-dir",
        type=Path,
        help="Root directory of the rule corpus (default: $RULESD_RULES_DIR or the git root)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    list_parser = subparsers.add_parser("list", help="List rules")
    list_parser.add_argument("-c", "--category", choices=RuleCategory.values())
    list_parser.add_argument("-l", "--language")
    list_parser.add_argument("-t", "--tags", nargs="+", metavar="TAG", help="Match any of these tags")

    get_parser = subparsers.add_parser("get", help="Show one rule with its content")
    get_parser.add_argument("rule_id")

    recommend_parser = subparsers.add_parser("recommend", help="Recommend rules for a scenario")
    recommend_parser.add_argument(
        "-t", "--type",
        required=True,
        choices=RuleCategory.values(),
        help="Scenario type",
    )
    recommend_parser.add_argument("-l", "--language")
    recommend_parser.add_argument("-f", "--framework")
    recommend_parser.add_argument(
        "-p", "--priorities",
        nargs="+",
        choices=[f.value for f in ScenarioFocus],
        metavar="PRIORITY",
        help="Focus areas: " + ", ".join(f.value for f in ScenarioFocus),
    )

    subparsers.add_parser("bundles", help="Show the pre-configured bundles")

    search_parser = subparsers.add_parser("search", help="Search rule text")
    search_parser.add_argument("query")
    search_parser.add_argument("-c", "--category", choices=RuleCategory.values())
    search_parser.add_argument("-l", "--language")

    related_parser = subparsers.add_parser("related", help="Show related rules")
    related_parser.add_argument("rule_id")

    prerequisites_parser = subparsers.add_parser("prerequisites", help="Show prerequisite rules")
    prerequisites_parser.add_argument("rule_id")

    validate_parser = subparsers.add_parser("validate", help="Check rule documents for structural problems")
    validate_parser.add_argument("-q", "--quiet", action="store_true", help="Only report errors")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def cli_main(argv: list[str] | None = None, out: Console | None = None) -> int:
    """Run the CLI and return its exit code."""
    args = parse_args(argv)
    out = out or console

    settings = Settings.from_environment()
    if args.rules_dir is not None:
        settings.rules_dir = args.rules_dir
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if not settings.has_rules_dir:
        out.print(f"Warning: rules directory not found: {settings.rules_dir}", style=COLORS["warning"], markup=False)

    engine = settings.create_engine()
    engine.initialize()
    logger.debug(f"Running command '{args.command}' against {settings.rules_dir}")

    return COMMAND_HANDLERS[args.command](out, engine, args)


def main() -> None:
    """CLI entry point."""
    try:
        sys.exit(cli_main())
    except KeyboardInterrupt:
        console.print("\nInterrupted.", style="dim")
        sys.exit(130)


if __name__ == "__main__":
    main()
