"""
Readwise export API client.

Fetches the highlight export one page at a time. There is no retry:
any failed request raises and ends the run.
"""

from typing import Iterator, Optional

import requests

from .config import Config
from .errors import ApiError, NetworkError
from .models import ExportPage

EXPORT_URL = "https://readwise.io/api/v2/export/"


class ReadwiseAPI:
    """
    Thin wrapper around the Readwise v2 export endpoint.

    Handles:
    - Token authentication
    - Cursor pagination
    - Incremental export via ``updatedAfter``
    - Mapping request failures onto NetworkError / ApiError
    """

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        """
        Initialize the Readwise API client.

        Args:
            config: Configuration instance with the Readwise token.
            session: Optional requests.Session, mainly so tests can fake HTTP.
        """
        self.config = config
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Authorization": f"Token {config.readwise_token}"})
        self._request_count = 0

    def fetch_page(self, cursor: Optional[str] = None) -> ExportPage:
        """
        Fetch a single page of the export.

        Args:
            cursor: ``nextPageCursor`` of the previous page, or None for the first.

        Returns:
            ExportPage with the raw book objects and the next cursor.

        Raises:
            NetworkError: On timeout or connection failure.
            ApiError: On an HTTP error status or a malformed body.
        """
        params = {}
        if cursor:
            params["pageCursor"] = cursor
        if self.config.updated_after:
            params["updatedAfter"] = self.config.updated_after

        self._request_count += 1
        try:
            response = self.session.get(
                EXPORT_URL,
                params=params,
                timeout=self.config.request_timeout,
            )
        except requests.Timeout as e:
            raise NetworkError(
                f"Readwise export request timed out after {self.config.request_timeout}s"
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"Readwise export request failed: {e}") from e

        if response.status_code >= 400:
            raise ApiError(
                "Readwise",
                "export request failed",
                status=response.status_code,
                payload=_response_payload(response),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ApiError(
                "Readwise",
                "received invalid JSON from export endpoint",
                status=response.status_code,
                payload=response.text[:500],
            ) from e

        if not isinstance(data, dict):
            raise ApiError(
                "Readwise",
                "unexpected response format from export endpoint",
                status=response.status_code,
                payload=data,
            )

        return ExportPage.from_api_response(data)

    def iter_pages(self) -> Iterator[ExportPage]:
        """Yield every export page, following cursors until the last one."""
        cursor = None
        while True:
            page = self.fetch_page(cursor)
            yield page
            if not page.next_page_cursor:
                break
            cursor = page.next_page_cursor

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    @property
    def request_count(self) -> int:
        """Number of API requests made."""
        return self._request_count


def _response_payload(response: requests.Response):
    try:
        return response.json()
    except ValueError:
        return response.text[:500]
