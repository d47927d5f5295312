#!/usr/bin/env python3
"""
Readwise → Notion Sync CLI

Usage:
    python sync.py                          # Run full sync
    python sync.py --dry-run                # Look up rows without writing
    python sync.py --updated-after 2024-01-01T00:00:00Z
    python sync.py --delay-ms 300           # Slow down between highlights
    python sync.py version                  # Show version
"""

import sys
from dataclasses import replace
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from readwise_notion_sync import __version__
from readwise_notion_sync.config import Config
from readwise_notion_sync.errors import ConfigError
from readwise_notion_sync.sync_engine import SyncEngine

console = Console()


@click.group(invoke_without_command=True)
@click.option("--dry-run", is_flag=True, help="Look up rows in Notion without writing")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.option("--updated-after", default=None, help="Only export highlights updated after this ISO timestamp")
@click.option("--delay-ms", type=click.IntRange(min=0), default=None, help="Pause between highlights in milliseconds")
@click.pass_context
def cli(ctx, dry_run: bool, debug: bool, updated_after: Optional[str], delay_ms: Optional[int]):
    """
    Readwise → Notion Sync

    Creates one Notion database row per highlighted URL and merges
    highlight tags into it.
    """
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["debug"] = debug
    ctx.obj["updated_after"] = updated_after
    ctx.obj["delay_ms"] = delay_ms

    # If no subcommand, run sync
    if ctx.invoked_subcommand is None:
        ctx.invoke(sync)


@cli.command()
@click.pass_context
def sync(ctx):
    """Run synchronization from Readwise to Notion."""
    debug = ctx.obj.get("debug", False)

    try:
        config = _apply_overrides(Config.from_env(), ctx.obj)

        engine = SyncEngine(config)
        result = engine.sync()

        # Exit with error code if sync failed
        if not result.success:
            sys.exit(1)

    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        console.print("\n[dim]Make sure you have created a .env file with your credentials.[/dim]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Sync cancelled.[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        if debug:
            console.print_exception()
        sys.exit(1)


@cli.command()
def version():
    """Show version information."""
    console.print(f"Readwise → Notion Sync v{__version__}")


def _apply_overrides(config: Config, options: dict) -> Config:
    """Return a copy of config with command-line options applied."""
    overrides = {}
    if options.get("dry_run"):
        overrides["dry_run"] = True
    if options.get("debug"):
        overrides["debug"] = True
    if options.get("updated_after"):
        overrides["updated_after"] = options["updated_after"]
    if options.get("delay_ms") is not None:
        overrides["delay_ms"] = options["delay_ms"]
    return replace(config, **overrides) if overrides else config


if __name__ == "__main__":
    cli()
