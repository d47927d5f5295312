"""
Main sync engine for Readwise → Notion synchronization.

Orchestrates:
- Paging through the Readwise export
- Normalization of export records
- URL-keyed upserts into Notion
- Pacing between highlights
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Config
from .errors import SyncError
from .models import UpsertOutcome
from .normalizer import normalize_highlights
from .notion_api import NotionAPI
from .rate_limit import FixedDelayLimiter, RateLimiter
from .readwise_api import ReadwiseAPI
from .upserter import Upserter

console = Console()


@dataclass
class SyncResult:
    """Result of a sync operation."""

    fetched: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    unconfirmed: int = 0
    pages: int = 0
    error: Optional[SyncError] = None

    @property
    def success(self) -> bool:
        """Check if sync was successful."""
        return self.error is None

    def record(self, outcome: UpsertOutcome) -> None:
        """Count one upsert outcome."""
        if outcome is UpsertOutcome.CREATED:
            self.created += 1
        elif outcome is UpsertOutcome.UPDATED:
            self.updated += 1
        elif outcome is UpsertOutcome.CREATE_UNCONFIRMED:
            self.unconfirmed += 1
        elif outcome.skipped:
            self.skipped += 1
        else:
            self.unchanged += 1


class SyncEngine:
    """
    Main orchestrator for Readwise → Notion synchronization.

    Coordinates all components to perform the sync:
    1. Fetch an export page from Readwise
    2. Normalize its books into highlights
    3. Upsert each highlight's URL row, pausing between highlights
    4. Follow the page cursor until the export is exhausted

    The first failure stops the run and is returned on the result.
    """

    def __init__(
        self,
        config: Config,
        readwise_api: Optional[ReadwiseAPI] = None,
        notion_api: Optional[NotionAPI] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        """
        Initialize sync engine.

        Args:
            config: Configuration instance.
            readwise_api: Source client; built from config if omitted.
            notion_api: Destination client; built from config if omitted.
            limiter: Pacing strategy; a fixed delay from config if omitted.
        """
        self.config = config
        self.readwise_api = readwise_api or ReadwiseAPI(config)
        self.notion_api = notion_api or NotionAPI(config)
        self.limiter = limiter or FixedDelayLimiter(config.delay_seconds)
        self.upserter = Upserter(
            self.notion_api,
            dry_run=config.dry_run,
            debug=config.debug,
        )

    def sync(self) -> SyncResult:
        """
        Perform full synchronization.

        Returns:
            SyncResult with counters and, on failure, the error that stopped it.
        """
        result = SyncResult()

        console.print("\n[bold blue]🔄 Starting Readwise → Notion Sync[/bold blue]\n")
        if self.config.dry_run:
            console.print("[yellow]Dry run: nothing will be written to Notion.[/yellow]")

        try:
            self._run(result)
        except SyncError as e:
            result.error = e
            console.print(f"[red]Sync failed:[/red] {escape(str(e))}")
            if self.config.debug:
                console.print_exception()
        finally:
            self.readwise_api.close()
            self.notion_api.close()

        self._print_summary(result)
        return result

    def _run(self, result: SyncResult) -> None:
        for page in self.readwise_api.iter_pages():
            result.pages += 1

            highlights = normalize_highlights(page.results)
            result.fetched += len(highlights)
            if self.config.debug:
                console.print(
                    f"[dim]Page {result.pages}: {len(highlights)} highlights[/dim]"
                )

            for highlight in highlights:
                result.record(self.upserter.upsert(highlight))
                self.limiter.wait()

    def _print_summary(self, result: SyncResult) -> None:
        """Print sync summary."""
        if result.success:
            console.print(
                f"\n[green]Sync complete:[/green] fetched {result.fetched}, created {result.created}"
            )
        else:
            console.print(
                f"\n[red]Sync aborted:[/red] fetched {result.fetched}, created {result.created}"
            )

        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Export pages", str(result.pages))
        table.add_row("Highlights processed", str(result.fetched))
        table.add_row("URL pages created", str(result.created))
        table.add_row("URL pages updated", str(result.updated))
        table.add_row("Unchanged", str(result.unchanged))
        table.add_row("Skipped (no URL or tags)", str(result.skipped))
        if result.unconfirmed:
            table.add_row("Creates without page id", str(result.unconfirmed))
        table.add_row("Readwise requests", str(self.readwise_api.request_count))
        table.add_row("Notion requests", str(self.notion_api.request_count))

        console.print(table)
        console.print("")
