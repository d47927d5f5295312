"""
URL-keyed upsert of highlights into the Notion database.

A row is created the first time a URL is seen; later highlights sharing
that URL only merge their tags into it.
"""

from rich.console import Console
from rich.markup import escape

from .models import DestinationRecord, NormalizedHighlight, UpsertOutcome
from .notion_api import NotionAPI

console = Console()


class Upserter:
    """
    Creates or merges one database row per distinct highlight URL.

    Highlights without a URL or without tags are skipped before any
    request is made.
    """

    def __init__(self, notion_api: NotionAPI, dry_run: bool = False, debug: bool = False):
        """
        Initialize the upserter.

        Args:
            notion_api: NotionAPI instance used for lookups and writes.
            dry_run: Look rows up but never create or update them.
            debug: Print one line per highlight.
        """
        self.notion_api = notion_api
        self.dry_run = dry_run
        self.debug = debug

    def upsert_url_with_tags(self, highlight: NormalizedHighlight) -> bool:
        """
        Upsert a highlight's URL row.

        Returns:
            True only if a new row was created.
        """
        return self.upsert(highlight) is UpsertOutcome.CREATED

    def upsert(self, highlight: NormalizedHighlight) -> UpsertOutcome:
        """
        Upsert a highlight's URL row and report what happened.

        Args:
            highlight: The normalized highlight.

        Returns:
            The UpsertOutcome for this highlight.
        """
        url = (highlight.url or "").strip()
        if not url:
            return UpsertOutcome.SKIPPED_NO_URL

        tags = [tag for tag in highlight.tags if tag]
        if not tags:
            return UpsertOutcome.SKIPPED_NO_TAGS

        properties = build_base_properties(highlight, url)
        existing = self.notion_api.find_by_url(url)

        if existing is not None:
            return self._merge(existing, properties, tags)
        return self._create(url, properties, tags)

    def _merge(
        self,
        existing: DestinationRecord,
        properties: dict,
        tags: list[str],
    ) -> UpsertOutcome:
        merged = merge_tags(existing.tags, tags)
        if not needs_update(existing.tags, merged):
            self._log(f"[dim]Unchanged:[/dim] {escape(existing.url)}")
            return UpsertOutcome.UNCHANGED

        if self.dry_run:
            console.print(f"[yellow][DRY-RUN][/yellow] Would update tags of {escape(existing.url)}: {escape(str(merged))}")
        else:
            self.notion_api.update_page(
                existing.id,
                {**properties, "Tags": multi_select(merged)},
            )
            self._log(f"[cyan]Updated:[/cyan] {escape(existing.url)} {escape(str(merged))}")
        return UpsertOutcome.UPDATED

    def _create(self, url: str, properties: dict, tags: list[str]) -> UpsertOutcome:
        if self.dry_run:
            console.print(f"[yellow][DRY-RUN][/yellow] Would create {escape(url)}: {escape(str(tags))}")
            return UpsertOutcome.CREATED

        page_id = self.notion_api.create_page({**properties, "Tags": multi_select(tags)})
        if not page_id:
            console.print(f"[yellow]Warning: create response for {escape(url)} has no page id[/yellow]")
            return UpsertOutcome.CREATE_UNCONFIRMED

        self._log(f"[green]Created:[/green] {escape(url)} {escape(str(tags))}")
        return UpsertOutcome.CREATED

    def _log(self, message: str) -> None:
        if self.debug:
            console.print(message)


def build_base_properties(highlight: NormalizedHighlight, url: str) -> dict:
    """
    Properties sent on both create and update.

    Source, Book and Author are left out entirely when empty: Notion
    clears a property that is sent empty.
    """
    properties = {
        "Title": {"title": _text(highlight.book_title.strip() or url)},
        "URL": {"url": url},
    }
    if highlight.category:
        properties["Source"] = {"rich_text": _text(highlight.category)}
    if highlight.book_title:
        properties["Book"] = {"rich_text": _text(highlight.book_title)}
    if highlight.book_author:
        properties["Author"] = {"rich_text": _text(highlight.book_author)}
    return properties


def merge_tags(existing: list[str], new: list[str]) -> list[str]:
    """Union preserving first-seen order, existing tags first."""
    return list(dict.fromkeys([*existing, *new]))


def needs_update(existing: list[str], merged: list[str]) -> bool:
    """
    Whether the merged tags differ from the stored ones.

    Compared position by position, so a reordering also counts as a change.
    """
    return len(merged) != len(existing) or any(
        tag != existing[i] for i, tag in enumerate(merged)
    )


def multi_select(names: list[str]) -> dict:
    return {"multi_select": [{"name": name} for name in names]}


def _text(content: str) -> list[dict]:
    return [{"type": "text", "text": {"content": content}}]
