"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.

Every API method returns the decoded JSON body as a plain ``dict``;
turning it into records is the core services' job.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from candlekeep_cli.core.models import EnrichmentRequest, Selector, UploadFile

ProgressCallback = Callable[[int, int], None]
"""Called with ``(bytes_sent, total_bytes)`` while uploading."""


class LibraryApi(Protocol):
    """Contract for the CandleKeep HTTP API.

    Implementations must map all transport and HTTP errors to
    :class:`~candlekeep_cli.exceptions.CandleKeepError` subclasses.
    """

    # --- account -----------------------------------------------------------

    def whoami(self) -> dict[str, Any]:
        ...  # pragma: no cover

    # --- items -------------------------------------------------------------

    def list_items(self) -> dict[str, Any]:
        ...  # pragma: no cover

    def batch_read(self, selector: Selector) -> dict[str, Any]:
        """Fetch pages for every entry of an already validated *selector*."""
        ...  # pragma: no cover

    def batch_toc(self, ids: Sequence[str]) -> dict[str, Any]:
        ...  # pragma: no cover

    def delete_items(self, ids: Sequence[str]) -> dict[str, Any]:
        ...  # pragma: no cover

    def enrich_item(self, item_id: str, request: EnrichmentRequest) -> dict[str, Any]:
        ...  # pragma: no cover

    def flag_item(self, item_id: str) -> dict[str, Any]:
        ...  # pragma: no cover

    # --- uploads -----------------------------------------------------------

    def create_upload(self, upload: UploadFile) -> dict[str, Any]:
        ...  # pragma: no cover

    def upload_file(
        self,
        upload_url: str,
        upload: UploadFile,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """PUT the file body to a presigned *upload_url*."""
        ...  # pragma: no cover

    def confirm_upload(self, item_id: str, storage_key: str) -> dict[str, Any]:
        ...  # pragma: no cover

    # --- markdown documents -----------------------------------------------

    def create_markdown(
        self,
        title: str,
        description: str | None = None,
        content: str | None = None,
    ) -> dict[str, Any]:
        ...  # pragma: no cover

    def get_content(self, item_id: str) -> dict[str, Any]:
        ...  # pragma: no cover

    def put_content(self, item_id: str, content: str) -> dict[str, Any]:
        ...  # pragma: no cover

    # --- sources -----------------------------------------------------------

    def list_sources(self, limit: int) -> dict[str, Any]:
        ...  # pragma: no cover

    def delete_sources(self, ids: Sequence[str]) -> dict[str, Any]:
        ...  # pragma: no cover

    # --- access sessions ---------------------------------------------------

    def create_session(self, intent: str | None = None) -> dict[str, Any]:
        ...  # pragma: no cover

    def complete_session(self, session_id: str) -> dict[str, Any]:
        ...  # pragma: no cover


class SessionStore(Protocol):
    """Contract for persisting the active access-session id between runs."""

    def read(self) -> str | None:
        """Return the stored session id, or ``None`` when there is none."""
        ...  # pragma: no cover

    def write(self, session_id: str) -> None:
        ...  # pragma: no cover

    def clear(self) -> None:
        """Forget the stored id (idempotent)."""
        ...  # pragma: no cover
