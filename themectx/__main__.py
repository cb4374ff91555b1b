from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from themectx.completion import CompletionService, RankTier
from themectx.config import load_config
from themectx.discovery import DiscoveryOrchestrator, LocalFileSource
from themectx.error_handler import ErrorHandler
from themectx.exceptions import ThemeContextError

_TIER_STYLES = {
    None: "cyan",
    RankTier.GLOBAL: "green",
    RankTier.VERIFIED: "cyan",
    RankTier.POTENTIAL: "yellow",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="themectx",
        description="Resolve which Liquid objects are reachable from a theme file.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to a themectx.toml")
    parser.add_argument("--workers", type=int, default=None, help="Threads for file scans")
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of tables")

    sub = parser.add_subparsers(dest="command", required=True)

    contexts = sub.add_parser("contexts", help="List verified contexts for a file")
    contexts.add_argument("theme", type=Path, help="Theme root directory")
    contexts.add_argument("file", help="File path relative to the theme root")

    complete = sub.add_parser("complete", help="Show completions for a line prefix")
    complete.add_argument("theme", type=Path, help="Theme root directory")
    complete.add_argument("file", help="File path relative to the theme root")
    complete.add_argument("prefix", help="Text left of the cursor, e.g. '{{ product.'")

    return parser


def _run_contexts(args: argparse.Namespace, console: Console, orchestrator: DiscoveryOrchestrator) -> int:
    result = orchestrator.resolve_file(args.file)

    if args.json:
        payload = {
            "category": result.category.value,
            "contexts": [c.model_dump(by_alias=True) for c in result.contexts],
            "errors": [e.model_dump(mode="json") for e in result.errors],
        }
        console.print_json(json.dumps(payload))
        return 0

    table = Table(title=f"{args.file} ({result.category})")
    table.add_column("Context key", style="cyan")
    table.add_column("Display name")
    for context in result.contexts:
        table.add_row(context.context_key, context.display_name)
    console.print(table)
    ErrorHandler.display_scan_errors(result.errors)
    return 0


def _run_complete(args: argparse.Namespace, console: Console, service: CompletionService) -> int:
    items = service.complete(args.file, args.prefix)

    if args.json:
        console.print_json(json.dumps([item.model_dump(mode="json") for item in items]))
        return 0

    if not items:
        console.print("[dim]No suggestions[/dim]")
        return 0

    table = Table(title=f"Completions for {args.prefix!r}")
    table.add_column("Label")
    table.add_column("Kind")
    table.add_column("Detail")
    for item in items:
        style = _TIER_STYLES.get(item.tier, "cyan")
        table.add_row(f"[{style}]{item.label}[/{style}]", item.kind.value, item.detail)
    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    console = Console()

    try:
        config = load_config(
            theme_root=args.theme,
            config_path=args.config,
            cli_overrides={"max_workers": args.workers, "log_level": args.log_level},
        )
    except ThemeContextError as e:
        ErrorHandler.display_error(e, context="Configuration")
        return 2

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    if not args.theme.is_dir():
        ErrorHandler.display_error(
            NotADirectoryError(f"Theme root not found: {args.theme}"), context="Theme lookup"
        )
        return 2

    source = LocalFileSource(args.theme)
    try:
        if args.command == "contexts":
            return _run_contexts(args, console, DiscoveryOrchestrator.from_config(source, config))
        return _run_complete(args, console, CompletionService.from_config(source, config))
    except ThemeContextError as e:
        ErrorHandler.display_error(e, context="Knowledge base")
        return 2


if __name__ == "__main__":
    sys.exit(main())
