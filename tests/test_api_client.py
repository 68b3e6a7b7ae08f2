"""Tests for the HTTP client (infra/api_client.py).

HTTP is mocked with ``responses`` — no network.  Coverage:

* Headers (auth, user agent, session tracking)
* Request payloads for every endpoint family
* Status-code → exception mapping
* Transport failures and undecodable bodies
* Presigned upload without credentials
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import pytest
import requests
import responses

from candlekeep_cli.core.models import (
    EnrichmentRequest,
    PageRange,
    Selector,
    SelectorEntry,
    SessionContext,
    TocEntry,
    UploadFile,
)
from candlekeep_cli.exceptions import (
    AccessDeniedError,
    ApiConnectionError,
    ApiError,
    AuthenticationFailedError,
    BadRequestError,
    NotFoundError,
    UnexpectedResponseError,
)
from candlekeep_cli.infra.api_client import SESSION_HEADER, CandleKeepClient, _ProgressReader
from candlekeep_cli.version import __version__

BASE = "https://ck.test"
API = f"{BASE}/api/v1"


def _client(session: SessionContext | None = None) -> CandleKeepClient:
    return CandleKeepClient(BASE + "/", "ck_secret", session=session)


def _sent_json(index: int = 0) -> Any:
    return json.loads(responses.calls[index].request.body)


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------

class TestHeaders:
    @responses.activate
    def test_auth_and_agent(self) -> None:
        responses.add(responses.GET, f"{API}/auth/whoami", json={"id": "u"})
        _client().whoami()

        headers = responses.calls[0].request.headers
        assert headers["Authorization"] == "Bearer ck_secret"
        assert headers["User-Agent"] == f"ck-cli/{__version__}"
        assert headers["Accept"] == "application/json"
        assert SESSION_HEADER not in headers

    @responses.activate
    def test_session_header_attached(self) -> None:
        responses.add(responses.GET, f"{API}/items", json={"items": []})
        _client(SessionContext(session_id="s-42")).list_items()
        assert responses.calls[0].request.headers[SESSION_HEADER] == "s-42"

    @responses.activate
    def test_session_header_suppressed_when_disabled(self) -> None:
        responses.add(responses.GET, f"{API}/items", json={"items": []})
        _client(SessionContext(session_id="s-42", disabled=True)).list_items()
        assert SESSION_HEADER not in responses.calls[0].request.headers


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

class TestPayloads:
    @responses.activate
    def test_batch_read_omits_pages_for_all(self) -> None:
        responses.add(responses.POST, f"{API}/items/batch", json={"items": []})
        selector = Selector(
            entries=(
                SelectorEntry("a", PageRange(1, 5)),
                SelectorEntry("b", PageRange()),
                SelectorEntry("a", PageRange(9, 9)),
            )
        )
        _client().batch_read(selector)
        assert _sent_json() == {
            "items": [
                {"id": "a", "pages": "1-5"},
                {"id": "b"},
                {"id": "a", "pages": "9-9"},
            ]
        }

    @responses.activate
    def test_batch_toc(self) -> None:
        responses.add(responses.POST, f"{API}/items/batch/toc", json={"items": []})
        _client().batch_toc(("a", "b"))
        assert _sent_json() == {"ids": ["a", "b"]}

    @responses.activate
    def test_delete_items(self) -> None:
        responses.add(responses.DELETE, f"{API}/items", json={"deleted": ["a"]})
        assert _client().delete_items(["a"]) == {"deleted": ["a"]}
        assert _sent_json() == {"ids": ["a"]}

    @responses.activate
    def test_enrich_omits_unset_fields(self) -> None:
        responses.add(responses.PATCH, f"{API}/items/enrich", json={"item": {}})
        request = EnrichmentRequest(
            author="FH",
            confidence=0.9,
            toc=(TocEntry("One", 1), TocEntry("Two", 4, 2)),
        )
        _client().enrich_item("i", request)
        assert _sent_json() == {
            "itemId": "i",
            "author": "FH",
            "confidence": 0.9,
            "toc": [
                {"title": "One", "page": 1, "level": 1},
                {"title": "Two", "page": 4, "level": 2},
            ],
        }

    @responses.activate
    def test_flag(self) -> None:
        responses.add(responses.POST, f"{API}/items/flag", json={"item": {}})
        _client().flag_item("i")
        assert _sent_json() == {"itemId": "i"}

    @responses.activate
    def test_create_markdown_minimal(self) -> None:
        responses.add(responses.POST, f"{API}/items/markdown", json={"id": "m"})
        _client().create_markdown("Notes")
        assert _sent_json() == {"title": "Notes"}

    @responses.activate
    def test_content_path_is_quoted(self) -> None:
        responses.add(responses.GET, f"{API}/items/a%2Fb/content", json={"content": ""})
        _client().get_content("a/b")
        assert len(responses.calls) == 1

    @responses.activate
    def test_put_content(self) -> None:
        responses.add(responses.PUT, f"{API}/items/m/content", json={"id": "m"})
        _client().put_content("m", "# Body")
        assert _sent_json() == {"content": "# Body"}

    @responses.activate
    def test_list_sources_limit(self) -> None:
        responses.add(responses.GET, f"{API}/sources", json={"sources": []})
        _client().list_sources(25)
        assert responses.calls[0].request.url == f"{API}/sources?limit=25"

    @responses.activate
    def test_sessions(self) -> None:
        responses.add(responses.POST, f"{API}/access/sessions", json={"sessionId": "s"})
        responses.add(
            responses.POST,
            f"{API}/access/sessions/s/complete",
            json={"sessionId": "s", "status": "COMPLETED"},
        )
        client = _client()
        client.create_session("why")
        client.complete_session("s")
        assert _sent_json(0) == {"intent": "why"}
        assert len(responses.calls) == 2

    @responses.activate
    def test_upload_handshake(self) -> None:
        responses.add(responses.POST, f"{API}/upload", json={"itemId": "i"})
        responses.add(responses.POST, f"{API}/upload/confirm", json={"item": {}})
        upload = UploadFile(Path("x.pdf"), "x.pdf", 10, "application/pdf")
        client = _client()
        client.create_upload(upload)
        client.confirm_upload("i", "key")
        assert _sent_json(0) == {"filename": "x.pdf", "size": 10, "contentType": "application/pdf"}
        assert _sent_json(1) == {"itemId": "i", "storageKey": "key"}


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

class TestErrorMapping:
    @pytest.mark.parametrize(
        ("status", "exc_class"),
        [
            (400, BadRequestError),
            (401, AuthenticationFailedError),
            (403, AccessDeniedError),
            (404, NotFoundError),
            (409, ApiError),
            (500, ApiError),
        ],
    )
    @responses.activate
    def test_status_codes(self, status: int, exc_class: type[ApiError]) -> None:
        responses.add(responses.GET, f"{API}/items", json={"error": "nope"}, status=status)
        with pytest.raises(exc_class) as exc_info:
            _client().list_items()
        assert exc_info.value.status_code == status
        assert "nope" in str(exc_info.value)

    @responses.activate
    def test_error_without_json_body(self) -> None:
        responses.add(responses.GET, f"{API}/items", body="<html>", status=502)
        with pytest.raises(ApiError, match="HTTP 502"):
            _client().list_items()

    @responses.activate
    def test_unauthorized_has_login_hint(self) -> None:
        responses.add(responses.GET, f"{API}/auth/whoami", json={}, status=401)
        with pytest.raises(AuthenticationFailedError) as exc_info:
            _client().whoami()
        assert exc_info.value.hint is not None
        assert "ck auth login" in exc_info.value.hint

    @responses.activate
    def test_connection_refused(self) -> None:
        responses.add(
            responses.GET,
            f"{API}/items",
            body=requests.exceptions.ConnectionError("refused"),
        )
        with pytest.raises(ApiConnectionError, match="Failed to connect"):
            _client().list_items()

    @responses.activate
    def test_timeout(self) -> None:
        responses.add(responses.GET, f"{API}/items", body=requests.exceptions.Timeout())
        with pytest.raises(ApiConnectionError, match="timed out"):
            _client().list_items()

    @responses.activate
    def test_undecodable_body(self) -> None:
        responses.add(responses.GET, f"{API}/items", body="not json", status=200)
        with pytest.raises(UnexpectedResponseError):
            _client().list_items()

    @responses.activate
    def test_non_object_body(self) -> None:
        responses.add(responses.GET, f"{API}/items", json=[1, 2], status=200)
        with pytest.raises(UnexpectedResponseError):
            _client().list_items()

    @responses.activate
    def test_no_retry(self) -> None:
        responses.add(responses.GET, f"{API}/items", json={}, status=503)
        with pytest.raises(ApiError):
            _client().list_items()
        assert len(responses.calls) == 1


# ---------------------------------------------------------------------------
# Presigned upload
# ---------------------------------------------------------------------------

class TestUploadFile:
    def _upload(self, tmp_path: Path) -> UploadFile:
        path = tmp_path / "book.pdf"
        path.write_bytes(b"0123456789")
        return UploadFile(path, "book.pdf", 10, "application/pdf")

    @responses.activate
    def test_put_without_credentials(self, tmp_path: Path) -> None:
        responses.add(responses.PUT, "https://storage.test/put?sig=1", status=200)
        _client(SessionContext(session_id="s")).upload_file(
            "https://storage.test/put?sig=1", self._upload(tmp_path),
        )
        request = responses.calls[0].request
        assert "Authorization" not in request.headers
        assert SESSION_HEADER not in request.headers
        assert request.headers["Content-Type"] == "application/pdf"
        assert request.headers["Content-Length"] == "10"

    @responses.activate
    def test_storage_rejection(self, tmp_path: Path) -> None:
        responses.add(responses.PUT, "https://storage.test/put", body="denied", status=403)
        with pytest.raises(ApiError, match="Upload failed"):
            _client().upload_file("https://storage.test/put", self._upload(tmp_path))

    @responses.activate
    def test_storage_unreachable(self, tmp_path: Path) -> None:
        responses.add(
            responses.PUT,
            "https://storage.test/put",
            body=requests.exceptions.ConnectionError("dns"),
        )
        with pytest.raises(ApiConnectionError):
            _client().upload_file("https://storage.test/put", self._upload(tmp_path))


class TestProgressReader:
    def test_reports_cumulative_bytes(self) -> None:
        seen: list[tuple[int, int]] = []
        reader = _ProgressReader(io.BytesIO(b"abcdef"), 6, lambda sent, total: seen.append((sent, total)))

        assert len(reader) == 6
        assert reader.read(4) == b"abcd"
        assert reader.read(4) == b"ef"
        assert reader.read(4) == b""
        assert seen == [(4, 6), (6, 6)]

    def test_callback_optional(self) -> None:
        reader = _ProgressReader(io.BytesIO(b"ab"), 2, None)
        assert reader.read() == b"ab"
