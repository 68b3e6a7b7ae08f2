"""``requests``-backed implementation of :class:`~candlekeep_cli.core.protocols.LibraryApi`.

This module is the **only** place in the codebase that imports
``requests``.  Every transport or HTTP error is caught here and
re-raised as a typed
:class:`~candlekeep_cli.exceptions.CandleKeepError` subclass — nothing
raw escapes the infrastructure boundary.

One call is one HTTP request: there is no retry or backoff.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import quote

import requests

from candlekeep_cli.core.models import (
    EnrichmentRequest,
    PageRange,
    Selector,
    SessionContext,
    UploadFile,
)
from candlekeep_cli.core.protocols import ProgressCallback
from candlekeep_cli.exceptions import (
    AccessDeniedError,
    ApiConnectionError,
    ApiError,
    AuthenticationFailedError,
    BadRequestError,
    InputFileError,
    NotFoundError,
    UnexpectedResponseError,
)
from candlekeep_cli.utils.logging import get_logger
from candlekeep_cli.version import __version__

log = get_logger(__name__)

SESSION_HEADER: str = "X-Session-Id"
DEFAULT_TIMEOUT: float = 30.0
UPLOAD_TIMEOUT: float = 300.0


# ---------------------------------------------------------------------------
# Upload body with progress reporting
# ---------------------------------------------------------------------------

class _ProgressReader:
    """File wrapper that reports bytes handed to the HTTP layer.

    ``__len__`` lets ``requests`` send a ``Content-Length`` instead of
    chunked encoding, which presigned storage URLs reject.
    """

    def __init__(
        self,
        handle: BinaryIO,
        total: int,
        callback: ProgressCallback | None,
    ) -> None:
        self._handle = handle
        self._total = total
        self._callback = callback
        self._sent = 0

    def __len__(self) -> int:
        return self._total

    def read(self, size: int = -1) -> bytes:
        chunk = self._handle.read(size)
        if chunk:
            self._sent += len(chunk)
            if self._callback is not None:
                self._callback(self._sent, self._total)
        return chunk


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class CandleKeepClient:
    """Concrete :class:`LibraryApi` talking to ``<base_url>/api/v1``.

    Usage::

        client = CandleKeepClient(config.api_url, config.api_key, session=ctx)
        listing = client.list_items()

    Parameters
    ----------
    base_url:
        Service root, e.g. ``https://www.getcandlekeep.com``.
    api_key:
        Bearer token sent with every API request.
    session:
        Access-session settings; the session header is only attached
        when an id is present and tracking is not disabled.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        session: SessionContext | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url: str = base_url.rstrip("/")
        self.timeout: float = timeout
        self.session_context: SessionContext = session or SessionContext()

        self._http = requests.Session()
        self._http.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
                "User-Agent": f"ck-cli/{__version__}",
            }
        )
        session_id = self.session_context.header_value
        if session_id:
            self._http.headers[SESSION_HEADER] = session_id

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> CandleKeepClient:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/v1{path}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one API request and return the decoded JSON object."""
        url = self._url(path)
        log.debug("api_request", method=method, path=path)

        try:
            response = self._http.request(
                method,
                url,
                json=json_body,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise ApiConnectionError(
                f"Request to {self.base_url} timed out.",
                hint="Check your network connection and try again.",
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise ApiConnectionError(
                f"Failed to connect to API at {self.base_url}.",
                hint="Check your network connection or CANDLEKEEP_API_URL.",
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise ApiConnectionError(f"Request failed: {exc}") from exc

        log.debug("api_response", method=method, path=path, status=response.status_code)

        if not response.ok:
            self._raise_for_status(response)

        try:
            body: Any = response.json()
        except ValueError as exc:
            raise UnexpectedResponseError(
                f"Failed to parse response from {method} {path}.",
            ) from exc
        if not isinstance(body, dict):
            raise UnexpectedResponseError(
                f"Expected a JSON object from {method} {path}.",
            )
        return body

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _error_text(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP {response.status_code}"

    @classmethod
    def _raise_for_status(cls, response: requests.Response) -> None:
        """Translate a non-success response into a domain exception.

        Always raises.
        """
        status = response.status_code
        text = cls._error_text(response)
        log.debug("api_error", status=status, error=text)

        if status == 400:
            raise BadRequestError(f"Bad request: {text}", status_code=status)
        if status == 401:
            raise AuthenticationFailedError(
                f"Authentication failed: {text}",
                status_code=status,
                hint="Run 'ck auth login' to store a valid API key.",
            )
        if status == 403:
            raise AccessDeniedError(f"Access denied: {text}", status_code=status)
        if status == 404:
            raise NotFoundError(f"Not found: {text}", status_code=status)
        raise ApiError(f"API error ({status}): {text}", status_code=status)

    # ------------------------------------------------------------------
    # Payload builders (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _pages_param(pages: PageRange | None) -> str | None:
        if pages is None or pages.is_all:
            return None
        return str(pages)

    @classmethod
    def build_read_payload(cls, selector: Selector) -> dict[str, Any]:
        items: list[dict[str, Any]] = []
        for entry in selector:
            item: dict[str, Any] = {"id": entry.identifier}
            pages = cls._pages_param(entry.pages)
            if pages is not None:
                item["pages"] = pages
            items.append(item)
        return {"items": items}

    @staticmethod
    def build_enrich_payload(item_id: str, request: EnrichmentRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {"itemId": item_id}
        for key in ("title", "author", "description", "confidence"):
            value = getattr(request, key)
            if value is not None:
                payload[key] = value
        if request.toc is not None:
            payload["toc"] = [
                {"title": entry.title, "page": entry.page, "level": entry.level}
                for entry in request.toc
            ]
        return payload

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def whoami(self) -> dict[str, Any]:
        return self._request("GET", "/auth/whoami")

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def list_items(self) -> dict[str, Any]:
        return self._request("GET", "/items")

    def batch_read(self, selector: Selector) -> dict[str, Any]:
        return self._request("POST", "/items/batch", json_body=self.build_read_payload(selector))

    def batch_toc(self, ids: Sequence[str]) -> dict[str, Any]:
        return self._request("POST", "/items/batch/toc", json_body={"ids": list(ids)})

    def delete_items(self, ids: Sequence[str]) -> dict[str, Any]:
        return self._request("DELETE", "/items", json_body={"ids": list(ids)})

    def enrich_item(self, item_id: str, request: EnrichmentRequest) -> dict[str, Any]:
        return self._request(
            "PATCH",
            "/items/enrich",
            json_body=self.build_enrich_payload(item_id, request),
        )

    def flag_item(self, item_id: str) -> dict[str, Any]:
        return self._request("POST", "/items/flag", json_body={"itemId": item_id})

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    def create_upload(self, upload: UploadFile) -> dict[str, Any]:
        return self._request(
            "POST",
            "/upload",
            json_body={
                "filename": upload.filename,
                "size": upload.size,
                "contentType": upload.content_type,
            },
        )

    def upload_file(
        self,
        upload_url: str,
        upload: UploadFile,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """PUT the file to a presigned URL.

        Uses a bare ``requests.put`` so that no API credentials are sent
        to the storage host.
        """
        log.debug("upload_start", filename=upload.filename, size=upload.size)
        try:
            with Path(upload.path).open("rb") as handle:
                body = _ProgressReader(handle, upload.size, progress_callback)
                response = requests.put(
                    upload_url,
                    data=body,
                    headers={"Content-Type": upload.content_type},
                    timeout=UPLOAD_TIMEOUT,
                )
        except OSError as exc:
            raise InputFileError(f"Failed to read file: {upload.path}") from exc
        except requests.exceptions.RequestException as exc:
            raise ApiConnectionError(f"Failed to upload file: {exc}") from exc

        if not response.ok:
            raise ApiError(
                f"Upload failed ({response.status_code}): {response.text[:200]}",
                status_code=response.status_code,
            )
        log.debug("upload_done", filename=upload.filename)

    def confirm_upload(self, item_id: str, storage_key: str) -> dict[str, Any]:
        return self._request(
            "POST",
            "/upload/confirm",
            json_body={"itemId": item_id, "storageKey": storage_key},
        )

    # ------------------------------------------------------------------
    # Markdown documents
    # ------------------------------------------------------------------

    def create_markdown(
        self,
        title: str,
        description: str | None = None,
        content: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": title}
        if description is not None:
            payload["description"] = description
        if content is not None:
            payload["content"] = content
        return self._request("POST", "/items/markdown", json_body=payload)

    def get_content(self, item_id: str) -> dict[str, Any]:
        return self._request("GET", f"/items/{quote(item_id, safe='')}/content")

    def put_content(self, item_id: str, content: str) -> dict[str, Any]:
        return self._request(
            "PUT",
            f"/items/{quote(item_id, safe='')}/content",
            json_body={"content": content},
        )

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def list_sources(self, limit: int) -> dict[str, Any]:
        return self._request("GET", "/sources", params={"limit": limit})

    def delete_sources(self, ids: Sequence[str]) -> dict[str, Any]:
        return self._request("DELETE", "/sources", json_body={"ids": list(ids)})

    # ------------------------------------------------------------------
    # Access sessions
    # ------------------------------------------------------------------

    def create_session(self, intent: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if intent is not None:
            payload["intent"] = intent
        return self._request("POST", "/access/sessions", json_body=payload)

    def complete_session(self, session_id: str) -> dict[str, Any]:
        return self._request(
            "POST",
            f"/access/sessions/{quote(session_id, safe='')}/complete",
        )
