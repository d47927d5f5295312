"""
Notion API wrapper for the sync system.

Provides a clean interface to the target database with:
- Rate limiting compliance
- Lookup of rows by their URL property
- Page creation and property updates
- Error mapping onto ApiError / NetworkError
"""

from typing import Any, Optional

import httpx
from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from ratelimit import limits, sleep_and_retry

from .config import Config
from .errors import ApiError, NetworkError
from .models import DestinationRecord

# Notion API rate limit: 3 requests per second
RATE_LIMIT_CALLS = 3
RATE_LIMIT_PERIOD = 1  # second

URL_PROPERTY = "URL"


class NotionAPI:
    """
    Wrapper around Notion API with rate limiting and utilities.

    Handles:
    - Authentication
    - Rate limiting (3 req/sec)
    - Querying the database by URL
    - Creating and updating pages
    """

    def __init__(self, config: Config, client: Optional[Client] = None):
        """
        Initialize the Notion API client.

        Args:
            config: Configuration instance with Notion token and database ID.
            client: Optional preconfigured client; built from config if omitted.
        """
        self.config = config
        self.client = client if client is not None else Client(
            auth=config.notion_token,
            timeout_ms=int(config.request_timeout * 1000),
        )
        self.database_id = format_notion_id(config.notion_database_id)
        self._request_count = 0

    @sleep_and_retry
    @limits(calls=RATE_LIMIT_CALLS, period=RATE_LIMIT_PERIOD)
    def _rate_limited_call(self, func, *args, **kwargs) -> Any:
        """Execute a rate-limited API call, mapping failures to sync errors."""
        self._request_count += 1
        try:
            return func(*args, **kwargs)
        except HTTPResponseError as e:
            raise ApiError(
                "Notion",
                str(e) or "request failed",
                status=getattr(e, "status", None),
                code=getattr(e, "code", None),
                payload=getattr(e, "body", None),
            ) from e
        except RequestTimeoutError as e:
            raise NetworkError(
                f"Notion request timed out after {self.config.request_timeout}s"
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"Notion request failed: {e}") from e

    def find_by_url(self, url: str) -> Optional[DestinationRecord]:
        """
        Find the database row whose URL property equals ``url``.

        The match is exact and case-sensitive. If several rows share the
        URL, whichever one Notion returns first is used.

        Args:
            url: The URL to look up.

        Returns:
            DestinationRecord, or None when no row matches.
        """
        response = self._rate_limited_call(
            self.client.databases.query,
            database_id=self.database_id,
            page_size=1,
            filter={
                "property": URL_PROPERTY,
                "url": {"equals": url},
            },
        )

        results = response.get("results") or []
        if not results:
            return None
        return DestinationRecord.from_api_response(results[0])

    def create_page(self, properties: dict) -> Optional[str]:
        """
        Create a new row in the database.

        Args:
            properties: Notion property values for the new page.

        Returns:
            ID of the created page, if the response carried one.
        """
        response = self._rate_limited_call(
            self.client.pages.create,
            parent={"database_id": self.database_id},
            properties=properties,
        )
        return (response or {}).get("id")

    def update_page(self, page_id: str, properties: dict) -> None:
        """Patch the given properties of an existing page."""
        self._rate_limited_call(
            self.client.pages.update,
            page_id=page_id,
            properties=properties,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()

    @property
    def request_count(self) -> int:
        """Number of API requests made."""
        return self._request_count


def format_notion_id(notion_id: str) -> str:
    """
    Format a database or page ID for API calls.

    IDs copied from Notion URLs come without dashes; the API
    accepts the standard UUID form in every case.
    """
    clean_id = notion_id.replace("-", "")

    if len(clean_id) == 32:
        return f"{clean_id[:8]}-{clean_id[8:12]}-{clean_id[12:16]}-{clean_id[16:20]}-{clean_id[20:]}"

    return notion_id
