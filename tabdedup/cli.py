#!/usr/bin/env python3
"""
tabdedup - find near-duplicate browser tabs

Reads tab snapshots (or saved HTML pages), groups tabs whose text is nearly
identical and shows which ones could be closed. It never closes tabs itself.
"""
import sys
import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Mapping
from rich.console import Console
from rich.table import Table
from rich.markup import escape

from tabdedup.config import init_config, get_config
from tabdedup.dedup import (
    KEEP_STRATEGIES,
    find_duplicate_tabs,
    get_duplicate_stats,
    groups_as_dicts,
    items_by_id,
    plan_closures,
)
from tabdedup.models import InputItem, SimilarityGroup
from tabdedup.tabs import TabRecordError, load_html_pages, load_tabs

logger = logging.getLogger(__name__)


console = Console()


def setup_logging(level: str):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format='%(levelname)s: %(message)s')


def load_inputs(args) -> List[InputItem]:
    """
    Load every input file named on the command line.

    Tab ids must be unique across all files, since groups and closure plans
    refer to tabs by id alone.
    """
    if getattr(args, "html", False):
        return load_html_pages(args.files)

    config = get_config()
    items = []
    seen = {}
    for path in args.files:
        for item in load_tabs(path, skip_internal=config.skip_internal_pages):
            if item.id in seen:
                raise TabRecordError(f"duplicate tab id {item.id!r} in {path} "
                                     f"(already loaded from {seen[item.id]})")
            seen[item.id] = path
            items.append(item)
    return items


def describe(item: InputItem) -> str:
    """Short human label for a tab."""
    return item.title or item.url or item.effective_text[:60] or "(no text)"


def output_groups(groups: List[SimilarityGroup], items: Mapping[str, InputItem], format: str = "table"):
    """Output duplicate groups in the specified format."""
    config = get_config()

    if format == "json":
        print(json.dumps(groups_as_dicts(groups), indent=2))
    elif format == "ids":
        for group in groups:
            print(" ".join(group.ids))
    elif not groups:
        console.print("[green]No duplicates found.[/green]")
    elif format == "table":
        table = Table(title=f"Duplicate tabs ({len(groups)} groups)")
        table.add_column("Group", style="cyan", justify="right")
        if config.show_scores:
            table.add_column("Similar", style="magenta", justify="right")
        table.add_column("Tab", style="yellow")
        table.add_column("Title / URL", style="green")

        for number, group in enumerate(groups, 1):
            for position, tab_id in enumerate(group.ids):
                label = describe(items[tab_id]) if tab_id in items else ""
                row = [str(number) if position == 0 else ""]
                if config.show_scores:
                    row.append(f"{group.avg_score * 100:.0f}%" if position == 0 else "")
                row += [escape(tab_id), escape(label[:70])]
                table.add_row(*row)
            table.add_section()

        console.print(table)
    else:  # plain
        for number, group in enumerate(groups, 1):
            score = f" ({group.avg_score * 100:.0f}% similar)" if config.show_scores else ""
            print(f"Group #{number}{score}")
            for tab_id in group.ids:
                label = describe(items[tab_id]) if tab_id in items else ""
                print(f"    [{tab_id}] {label}")
            print()


def cmd_find(args):
    """Find duplicate tabs."""
    items = load_inputs(args)
    groups = find_duplicate_tabs(items, threshold=args.threshold)
    output_groups(groups, items_by_id(items), args.output)


def cmd_plan(args):
    """Show which tabs would be closed."""
    config = get_config()
    items = load_inputs(args)
    groups = find_duplicate_tabs(items, threshold=args.threshold)
    plans = plan_closures(groups, keep_ids=args.keep, strategy=args.strategy or config.keep_strategy)

    if args.output == "json":
        print(json.dumps([p.to_dict() for p in plans], indent=2))
        return
    if args.output == "ids":
        for plan in plans:
            print(" ".join(plan.close))
        return

    if not plans:
        console.print("[green]Nothing to close.[/green]")
        return

    index = items_by_id(items)
    for number, plan in enumerate(plans, 1):
        console.print(f"[bold]Group #{number}[/bold] [dim]({plan.avg_score * 100:.0f}% similar)[/dim]")
        console.print("  [green]keep [/green] " + escape(f"[{plan.keep}] {describe(index[plan.keep])}"))
        for tab_id in plan.close:
            console.print("  [red]close[/red] " + escape(f"[{tab_id}] {describe(index[tab_id])}"))

    total = sum(len(p.close) for p in plans)
    if not args.quiet:
        console.print(f"\n[yellow]{total} tab(s) would be closed.[/yellow]")


def cmd_stats(args):
    """Show duplicate statistics."""
    items = load_inputs(args)
    groups = find_duplicate_tabs(items, threshold=args.threshold)
    stats = get_duplicate_stats(items, groups)

    if args.output == "json":
        print(json.dumps(stats, indent=2))
        return

    console.print("[bold]Duplicate statistics[/bold]")
    console.print(f"  Tabs compared: {stats['total_tabs']}")
    console.print(f"  Duplicate groups: {stats['duplicate_groups']}")
    console.print(f"  Tabs in groups: {stats['total_duplicates']}")
    console.print(f"  Tabs to close: {stats['tabs_to_close']}")
    console.print(f"  Largest group: {stats['largest_group']}")
    console.print(f"  Duplicate share: {stats['duplicate_percentage']:.1f}%")

    if stats['tightest_groups']:
        console.print("\n[bold]Most similar groups[/bold]")
        for ids, avg_score in stats['tightest_groups']:
            console.print(f"  {avg_score * 100:.0f}%  " + escape(" ".join(ids)))


def cmd_config(args):
    """Manage configuration."""
    config = get_config()

    if args.action == "show":
        if args.key:
            if not hasattr(config, args.key):
                console.print(f"[red]Unknown config key: {args.key}[/red]")
                sys.exit(1)
            print(getattr(config, args.key))
        else:
            print(json.dumps(asdict(config), indent=2))

    elif args.action == "set":
        if not args.key or args.value is None:
            console.print("[red]Usage: tabdedup config set KEY VALUE[/red]")
            sys.exit(1)
        config.set_value(args.key, args.value)
        config.save()
        if not args.quiet:
            console.print(f"[green]Set {args.key} = {getattr(config, args.key)}[/green]")

    elif args.action == "init":
        from tabdedup.config import USER_CONFIG_PATH
        config.save(USER_CONFIG_PATH)
        console.print(f"[green]Created config at {USER_CONFIG_PATH}[/green]")


def add_input_arguments(parser):
    parser.add_argument("files", nargs="+", help="Tab JSON file(s), or HTML pages with --html")
    parser.add_argument("--html", action="store_true", help="Inputs are saved HTML pages")
    parser.add_argument("-t", "--threshold", type=float,
                        help="Similarity threshold 0-1 (default: from config, 0.82)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabdedup",
        description="tabdedup: find near-duplicate browser tabs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tabdedup find tabs.json
  tabdedup --output json find tabs.json --threshold 0.9
  tabdedup find --html saved/*.html
  tabdedup plan tabs.json --keep 42
  tabdedup stats tabs.json
  tabdedup config set duplicate_threshold 0.85

Configuration:
  Config file: ~/.config/tabdedup/config.toml or ./tabdedup.toml
  Environment: TABDEDUP_DUPLICATE_THRESHOLD, TABDEDUP_OUTPUT_FORMAT
        """
    )

    # Global options
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-o", "--output", choices=["table", "json", "plain", "ids"],
                        help="Output format")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    find_parser = subparsers.add_parser("find", help="Find duplicate tabs")
    add_input_arguments(find_parser)
    find_parser.set_defaults(func=cmd_find)

    plan_parser = subparsers.add_parser("plan", help="Show which duplicate tabs would be closed")
    add_input_arguments(plan_parser)
    plan_parser.add_argument("--keep", nargs="+", default=[], help="Tab id(s) to keep")
    plan_parser.add_argument("--strategy", choices=KEEP_STRATEGIES,
                             help="Which tab to keep when none is chosen (default: first)")
    plan_parser.set_defaults(func=cmd_plan)

    stats_parser = subparsers.add_parser("stats", help="Show duplicate statistics")
    add_input_arguments(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("action", choices=["show", "set", "init"], help="Config action")
    config_parser.add_argument("key", nargs="?", help="Config key")
    config_parser.add_argument("value", nargs="?", help="Config value (for set)")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv=None):
    """Main entry point."""
    global console

    parser = build_parser()
    args = parser.parse_args(argv)

    config_args = {}
    if args.output:
        config_args["output_format"] = args.output
    if args.verbose:
        config_args["log_level"] = "DEBUG"

    try:
        config = init_config(config_file=Path(args.config) if args.config else None, **config_args)
        setup_logging(config.log_level)

        if not config.color_output:
            console = Console(no_color=True)

        if not args.output:
            args.output = config.output_format

        args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
