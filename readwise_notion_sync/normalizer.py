"""
Flattens Readwise export pages into NormalizedHighlight records.

Missing or oddly shaped fields are defaulted, never rejected.
"""

from typing import Any, Iterable, Optional

from .models import NormalizedHighlight


def normalize_highlights(results: Optional[Iterable[dict]]) -> list[NormalizedHighlight]:
    """
    Convert the ``results`` of one export page into a flat list.

    Order is preserved: books in page order, highlights in book order.

    Args:
        results: List of Readwise book objects; may be None.

    Returns:
        One NormalizedHighlight per raw highlight.
    """
    highlights = []

    for book in results or []:
        if not isinstance(book, dict):
            book = {}
        meta = {
            "book_title": book.get("title") or "",
            "book_author": book.get("author") or "",
            "source_url": book.get("source_url") or "",
            "category": book.get("category") or "",  # books, articles, tweets, ...
        }

        raw_highlights = book.get("highlights")
        if not isinstance(raw_highlights, list):
            continue

        for raw in raw_highlights:
            if not isinstance(raw, dict):
                raw = {}
            highlights.append(
                NormalizedHighlight(
                    id=_highlight_id(raw.get("id")),
                    text=raw.get("text") or "",
                    note=raw.get("note") or "",
                    location=raw.get("location"),
                    highlighted_at=raw.get("highlighted_at") or raw.get("created_at") or None,
                    url=raw.get("url") or meta["source_url"] or "",
                    tags=tuple(tag_names(raw.get("tags"))),
                    **meta,
                )
            )

    return highlights


def tag_names(raw_tags: Any) -> list[str]:
    """
    Reduce Readwise tag entries to plain names.

    Entries are either bare strings or ``{"name": ...}`` objects; anything
    else is dropped, as are empty names. Duplicates are kept.
    """
    if not isinstance(raw_tags, list):
        return []

    names = []
    for tag in raw_tags:
        if isinstance(tag, str):
            name = tag
        elif isinstance(tag, dict) and isinstance(tag.get("name"), str):
            name = tag["name"]
        else:
            continue
        if name:
            names.append(name)
    return names


def _highlight_id(value: Any) -> str:
    # missing ids become "" rather than "None"
    return "" if value is None else str(value)
