"""Subcommands for rules.d CLI.

Each command takes the console, an initialized engine and the parsed
arguments, and returns the process exit code.
"""

import argparse
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rulesd_core.rules import (
    RecommendationBundle,
    Rule,
    RuleEngine,
    RuleNotFoundError,
    ScenarioContext,
)
from rulesd_cli.colors import COLORS, MAX_BUNDLE_IDS, MAX_TITLE_LENGTH, PRIORITY_COLORS


def _truncate(text: str, limit: int = MAX_TITLE_LENGTH) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _format_language(rule: Rule) -> str:
    return ", ".join(rule.metadata.languages)


def _rules_table(rules: Iterable[Rule]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style=COLORS["id"], no_wrap=True)
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Language")
    table.add_column("Priority")
    table.add_column("Tags", style=COLORS["dim"])

    for rule in rules:
        meta = rule.metadata
        priority = meta.priority.value
        table.add_row(
            escape(meta.id),
            escape(_truncate(meta.title)),
            meta.category.value,
            _format_language(rule),
            f"[{PRIORITY_COLORS[priority]}]{priority}[/]",
            ", ".join(meta.tags),
        )
    return table


def print_rules(console: Console, rules: list[Rule], heading: str) -> None:
    """Print a table of rules, or a notice when there are none."""
    if not rules:
        console.print("No rules found.", style=COLORS["dim"])
        return

    console.print(f"\n[bold]{escape(heading)}[/bold] ({len(rules)})\n", style=COLORS["primary"])
    console.print(_rules_table(rules))
    console.print()


def print_bundle(console: Console, bundle: RecommendationBundle) -> None:
    console.print(f"\n[bold]Bundle: {escape(bundle.name)}[/bold]", style=COLORS["primary"])
    console.print(bundle.description, style=COLORS["dim"], markup=False)
    if bundle.scenarios:
        console.print(f"Scenarios: {', '.join(bundle.scenarios)}", style=COLORS["dim"])

    if not bundle.rules:
        console.print("No rules matched this scenario.", style=COLORS["dim"])
        console.print()
        return

    console.print()
    console.print(_rules_table(bundle.rules))
    console.print()


def list_rules(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """List rules, optionally filtered by category, language and tags."""
    rules = engine.search_rules(
        category=args.category,
        language=args.language,
        tags=args.tags,
    )
    print_rules(console, rules, "Rules")
    return 0


def get_rule(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """Show metadata and content of one rule."""
    try:
        rule = engine.get_rule(args.rule_id)
    except RuleNotFoundError as e:
        console.print(f"Error: {e}", style=COLORS["error"], markup=False)
        return 1

    console.print(f"\n[bold]Rule: {escape(rule.id)}[/bold]", style=COLORS["primary"])
    console.print(f"Source: {rule.file_path}", style=COLORS["dim"], markup=False)
    console.print_json(data=rule.metadata.to_dict())
    console.print("\n[bold]Content:[/bold]", style=COLORS["primary"])
    console.print(rule.content, markup=False)
    console.print()
    return 0


def recommend(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """Recommend a bundle for a scenario."""
    try:
        context = ScenarioContext(
            type=args.type,
            language=args.language,
            framework=args.framework,
            priorities=tuple(args.priorities or ()),
        )
    except ValueError as e:
        console.print(f"Error: {e}", style=COLORS["error"], markup=False)
        return 2

    print_bundle(console, engine.recommend_bundle(context))
    return 0


def list_bundles(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """Show every pre-configured bundle."""
    bundles = engine.get_common_bundles()

    console.print("\n[bold]Common Bundles:[/bold]\n", style=COLORS["primary"])
    table = Table(show_header=True, header_style="bold")
    table.add_column("Bundle", style=COLORS["id"], no_wrap=True)
    table.add_column("Description")
    table.add_column("Rules", justify="right")
    table.add_column("Top rules", style=COLORS["dim"])

    for key, bundle in bundles.items():
        ids = bundle.rule_ids
        preview = ", ".join(ids[:MAX_BUNDLE_IDS])
        if len(ids) > MAX_BUNDLE_IDS:
            preview += ", ..."
        table.add_row(key, bundle.description, str(len(ids)), preview)

    console.print(table)
    console.print()
    return 0


def search(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """Search rule titles, descriptions and bodies."""
    rules = engine.search_rules(
        query=args.query,
        category=args.category,
        language=args.language,
    )
    print_rules(console, rules, f"Results for '{args.query}'")
    return 0


def related(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """Show rules related to a rule."""
    try:
        rules = engine.get_related_rules(args.rule_id)
    except RuleNotFoundError as e:
        console.print(f"Error: {e}", style=COLORS["error"], markup=False)
        return 1

    print_rules(console, rules, f"Related to {args.rule_id}")
    return 0


def prerequisites(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """Show prerequisites of a rule."""
    try:
        rules = engine.get_prerequisites(args.rule_id)
    except RuleNotFoundError as e:
        console.print(f"Error: {e}", style=COLORS["error"], markup=False)
        return 1

    print_rules(console, rules, f"Prerequisites of {args.rule_id}")
    return 0


def validate(console: Console, engine: RuleEngine, args: argparse.Namespace) -> int:
    """Validate every rule document. Exits 1 when any document fails."""
    results = engine.validate()
    failed = [r for r in results if not r.passed]
    with_warnings = [r for r in results if r.warnings]

    if failed:
        console.print("\nErrors:", style=f"bold {COLORS['error']}")
        for result in failed:
            for error in result.errors:
                console.print(f"  {result.file_path}: {error}", style=COLORS["error"], markup=False)

    if with_warnings and not args.quiet:
        console.print("\nWarnings:", style=f"bold {COLORS['warning']}")
        for result in with_warnings:
            for warning in result.warnings:
                console.print(f"  {result.file_path}: {warning}", style=COLORS["warning"], markup=False)

    if not failed and not with_warnings:
        console.print(f"All {len(results)} rules are valid.", style=COLORS["primary"])
    else:
        console.print(
            f"\nValidated {len(results)} rules: {len(results) - len(failed)} passed, "
            f"{len(failed)} failed.",
            style=COLORS["dim"],
        )

    return 1 if failed else 0


COMMAND_HANDLERS = {
    "list": list_rules,
    "get": get_rule,
    "recommend": recommend,
    "bundles": list_bundles,
    "search": search,
    "related": related,
    "prerequisites": prerequisites,
    "validate": validate,
}
