"""
anywhereify CLI: command-line interface for anywhereify.

Provides commands for:
- build: Bundle the configured exports into <out>/index.js
- compile: Print the generated source fragments without installing anything
- externals: Compare two lockfiles and show which packages would be externalized
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.table import Table

from anywhereify.errors import ExportSpecError, ToolchainError

console = Console()
err_console = Console(stderr=True)


def _split_list(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="anywhereify",
        description="anywhereify: bundle npm packages for a host runtime",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # build
    build_parser = subparsers.add_parser(
        "build",
        help="Bundle the configured exports",
    )
    build_parser.add_argument(
        "--config", "-c",
        help="Path to anywhere.config.json (default: search upwards from cwd)",
    )
    build_parser.add_argument(
        "--out", "-o",
        help="Output directory (overrides config)",
    )
    build_parser.add_argument(
        "--host",
        help="Host project supplying dependencies at runtime (overrides config)",
    )
    build_parser.add_argument(
        "--polyfills",
        help="Comma-separated polyfill packages loaded before the exports",
    )
    build_parser.add_argument(
        "--no-minify",
        action="store_true",
        help="Skip minification",
    )
    build_parser.add_argument(
        "--force",
        action="store_true",
        help="Rebuild even if the output is up to date",
    )
    build_parser.add_argument(
        "--keep-temp",
        action="store_true",
        help="Keep the temporary build project",
    )

    # compile
    compile_parser = subparsers.add_parser(
        "compile",
        help="Print generated declarations and module exports",
    )
    compile_parser.add_argument(
        "--config", "-c",
        help="Path to anywhere.config.json (default: search upwards from cwd)",
    )
    compile_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    # externals
    externals_parser = subparsers.add_parser(
        "externals",
        help="Decide externals from two lockfiles",
    )
    externals_parser.add_argument(
        "super_lock",
        help="Host package-lock.json (or its directory)",
    )
    externals_parser.add_argument(
        "sub_lock",
        help="Bundle package-lock.json (or its directory)",
    )
    externals_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "build":
        return handle_build(args)
    elif args.command == "compile":
        return handle_compile(args)
    elif args.command == "externals":
        return handle_externals(args)
    else:
        parser.print_help()
        return 0


def _load_config(args: argparse.Namespace):
    from anywhereify.config import AnywhereConfig

    config_path = Path(args.config) if args.config else None
    return AnywhereConfig.load(config_path=config_path)


def handle_build(args: argparse.Namespace) -> int:
    """Handle the build command."""
    from anywhereify.builder import Builder

    try:
        config = _load_config(args)
        overrides = {}
        if args.out:
            overrides["out"] = Path(args.out).resolve()
        if args.host:
            overrides["host"] = Path(args.host).resolve()
        if args.polyfills:
            overrides["polyfills"] = config.polyfills + _split_list(args.polyfills)
        if args.no_minify:
            overrides["minify"] = False
        if args.keep_temp:
            overrides["keep_temp"] = True
        if overrides:
            config = replace(config, **overrides)

        with console.status("Building...") as status:
            builder = Builder(config, on_step=lambda step: status.update(f"{step}..."))
            result = builder.build(force=args.force)

    except (ExportSpecError, ToolchainError, ValueError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {e}", markup=True, highlight=False)
        return 1

    if result.cached:
        console.print(f"[dim]Up to date:[/dim] {result.out_file}")
        return 0

    if result.externals:
        console.print(f"Externals: {', '.join(result.externals)}")
    console.print(f"Output: {result.out_file}")
    console.print(
        f"✨ [green]Anywhereified your project in {result.duration_s:.2f}s.[/green]"
    )
    return 0


def handle_compile(args: argparse.Namespace) -> int:
    """Handle the compile command."""
    from anywhereify.exports import (
        declare_exports,
        declare_global_exports,
        generate_module_exports,
        packages,
        sanitize_exports,
    )

    try:
        config = _load_config(args)
        exports = sanitize_exports(config.raw_exports)
    except (ExportSpecError, ValueError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {e}", markup=True, highlight=False)
        return 1

    fragments = {
        "packages": packages(exports),
        "declarations": declare_exports(exports),
        "global_declarations": declare_global_exports(exports),
        "module_exports": generate_module_exports(exports),
    }

    if args.json_output:
        print(json.dumps(fragments, indent=2))
        return 0

    console.print(f"[bold]Packages:[/bold] {', '.join(fragments['packages'])}")
    for title, key in (
        ("Declarations", "declarations"),
        ("Global declarations", "global_declarations"),
        ("Module exports", "module_exports"),
    ):
        console.rule(title)
        console.print(fragments[key] or "[dim](none)[/dim]", highlight=False)
    return 0


def handle_externals(args: argparse.Namespace) -> int:
    """Handle the externals command."""
    from anywhereify.externals import DependencySnapshot, decide_externals

    try:
        super_snapshot = DependencySnapshot.from_lockfile(Path(args.super_lock), label="super")
        sub_snapshot = DependencySnapshot.from_lockfile(Path(args.sub_lock), label="sub")
    except (FileNotFoundError, json.JSONDecodeError) as e:
        err_console.print(f"[red]Error:[/red] {e}", markup=True, highlight=False)
        return 1

    decisions = decide_externals(super_snapshot, sub_snapshot)

    if args.json_output:
        print(json.dumps([d.to_dict() for d in decisions], indent=2))
        return 0

    if not decisions:
        console.print("No packages shared between the two lockfiles")
        return 0

    table = Table(title="Externalization decisions")
    table.add_column("Package")
    table.add_column("Host (super)", justify="right")
    table.add_column("Bundle (sub)", justify="right")
    table.add_column("Externalize", justify="center")
    for d in decisions:
        table.add_row(
            d.name,
            d.super_version,
            d.sub_version,
            "[green]yes[/green]" if d.should_externalize else "[red]no[/red]",
        )
    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
