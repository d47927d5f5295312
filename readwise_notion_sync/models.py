"""
Data models shared by the sync components.

Readwise export records arrive as plain dicts and are flattened into
NormalizedHighlight; Notion pages are read back into DestinationRecord.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class NormalizedHighlight:
    """A single highlight with its book metadata denormalized onto it."""

    id: str
    text: str
    note: str
    location: Any
    highlighted_at: Optional[str]
    url: str
    tags: tuple[str, ...]
    book_title: str = ""
    book_author: str = ""
    source_url: str = ""
    category: str = ""


@dataclass
class ExportPage:
    """One page of the Readwise export."""

    results: list[dict] = field(default_factory=list)
    next_page_cursor: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict) -> "ExportPage":
        """Create ExportPage from API response."""
        results = data.get("results") or []
        cursor = data.get("nextPageCursor")
        return cls(
            results=list(results) if isinstance(results, list) else [],
            next_page_cursor=str(cursor) if cursor else None,
        )


@dataclass
class DestinationRecord:
    """A row of the Notion database, keyed by its URL property."""

    id: str
    url: str = ""
    title: str = ""
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, page: dict) -> "DestinationRecord":
        """Create DestinationRecord from a Notion page object."""
        properties = page.get("properties") or {}

        title = ""
        title_prop = properties.get("Title") or {}
        if title_prop.get("title"):
            title = "".join(
                part.get("plain_text", "") for part in title_prop["title"]
            )

        url = (properties.get("URL") or {}).get("url") or ""

        multi_select = (properties.get("Tags") or {}).get("multi_select") or []
        tags = [option["name"] for option in multi_select if option.get("name")]

        return cls(id=page["id"], url=url, title=title, tags=tags)


class UpsertOutcome(Enum):
    """What happened to a single highlight during upsert."""
    CREATED = "created"
    CREATE_UNCONFIRMED = "create_unconfirmed"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED_NO_URL = "skipped_no_url"
    SKIPPED_NO_TAGS = "skipped_no_tags"

    @property
    def skipped(self) -> bool:
        return self in (UpsertOutcome.SKIPPED_NO_URL, UpsertOutcome.SKIPPED_NO_TAGS)
