"""Tests for the Readwise export client using a fake HTTP session."""
from __future__ import annotations

import pytest
import requests

from fakes import FakeResponse, FakeSession, export_page, make_config
from readwise_notion_sync.errors import ApiError, NetworkError
from readwise_notion_sync.readwise_api import EXPORT_URL, ReadwiseAPI


def test_fetch_page_sends_token_and_omits_cursor() -> None:
    session = FakeSession([export_page([{"title": "Book A", "highlights": []}], cursor="NEXT")])
    api = ReadwiseAPI(make_config(), session=session)  # type: ignore[arg-type]

    page = api.fetch_page()

    assert session.headers["Authorization"] == "Token rw-token"
    assert session.calls == [(EXPORT_URL, {}, 30.0)]
    assert page.results == [{"title": "Book A", "highlights": []}]
    assert page.next_page_cursor == "NEXT"


def test_fetch_page_passes_cursor_and_updated_after() -> None:
    session = FakeSession([export_page([])])
    config = make_config(updated_after="2024-01-01T00:00:00Z")
    api = ReadwiseAPI(config, session=session)  # type: ignore[arg-type]

    page = api.fetch_page("abc")

    _, params, _ = session.calls[0]
    assert params == {"pageCursor": "abc", "updatedAfter": "2024-01-01T00:00:00Z"}
    assert page.results == []
    assert page.next_page_cursor is None


def test_iter_pages_follows_cursor_until_exhausted() -> None:
    session = FakeSession(
        [
            export_page([{"title": "One"}], cursor="c1"),
            export_page([{"title": "Two"}], cursor=None),
        ]
    )
    api = ReadwiseAPI(make_config(), session=session)  # type: ignore[arg-type]

    pages = list(api.iter_pages())

    assert [p.results[0]["title"] for p in pages] == ["One", "Two"]
    assert [params for _, params, _ in session.calls] == [{}, {"pageCursor": "c1"}]
    assert api.request_count == 2


def test_timeout_raises_network_error() -> None:
    session = FakeSession([requests.Timeout("slow")])
    api = ReadwiseAPI(make_config(), session=session)  # type: ignore[arg-type]

    with pytest.raises(NetworkError):
        api.fetch_page()


def test_connection_error_raises_network_error() -> None:
    session = FakeSession([requests.ConnectionError("refused")])
    api = ReadwiseAPI(make_config(), session=session)  # type: ignore[arg-type]

    with pytest.raises(NetworkError):
        api.fetch_page()


def test_http_error_carries_payload() -> None:
    session = FakeSession([FakeResponse({"detail": "Invalid token."}, status_code=401)])
    api = ReadwiseAPI(make_config(), session=session)  # type: ignore[arg-type]

    with pytest.raises(ApiError) as excinfo:
        api.fetch_page()

    assert excinfo.value.status == 401
    assert excinfo.value.payload == {"detail": "Invalid token."}
    assert "Invalid token." in str(excinfo.value)


def test_invalid_json_raises_api_error() -> None:
    session = FakeSession([FakeResponse(None, text="<html>oops</html>")])
    api = ReadwiseAPI(make_config(), session=session)  # type: ignore[arg-type]

    with pytest.raises(ApiError) as excinfo:
        api.fetch_page()

    assert excinfo.value.payload == "<html>oops</html>"


def test_non_object_body_raises_api_error() -> None:
    session = FakeSession([FakeResponse(["unexpected"])])
    api = ReadwiseAPI(make_config(), session=session)  # type: ignore[arg-type]

    with pytest.raises(ApiError):
        api.fetch_page()
