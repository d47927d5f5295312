"""
Readwise → Notion Sync

Copies the URLs and tags of Readwise highlights into a Notion
database, one row per URL, merging tags on every later sync.
"""

__version__ = "1.0.0"
