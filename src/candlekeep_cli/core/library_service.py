"""Core library service — validates input, then drives the API.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~candlekeep_cli.core.protocols.LibraryApi`
injected at construction time (dependency inversion), keeping the core
free of any HTTP imports.

Guarantees
----------
* Input is fully validated before the first API call.
* Pure orchestration — no ``print()``, no filesystem access.
* Only :class:`~candlekeep_cli.exceptions.CandleKeepError` subclasses
  escape.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from candlekeep_cli.core import responses
from candlekeep_cli.core.enrichment import parse_enrichment
from candlekeep_cli.core.models import EnrichmentRequest, UploadFile
from candlekeep_cli.core.protocols import LibraryApi, ProgressCallback
from candlekeep_cli.core.records import (
    Account,
    ContentUpdate,
    DeleteResult,
    DocumentContent,
    EnrichedItem,
    FlaggedItem,
    ItemListing,
    MarkdownDocument,
    ReadResult,
    TocResult,
    UploadReceipt,
)
from candlekeep_cli.core.selector import parse_id_list, parse_selector
from candlekeep_cli.core.uploads import require_content
from candlekeep_cli.exceptions import (
    CandleKeepError,
    InputValidationError,
    MalformedSelectorError,
    UnexpectedResponseError,
)

T = TypeVar("T")


def call_api(operation: Callable[[], T]) -> T:
    """Run one API call, ensuring only our exceptions escape."""
    try:
        return operation()
    except CandleKeepError:
        # Already one of ours.
        raise
    except Exception as exc:
        raise UnexpectedResponseError(
            f"Unexpected API client error: {exc}",
        ) from exc


def validate_item_id(item_id: str) -> str:
    """Return *item_id* trimmed; raise on empty input."""
    stripped = item_id.strip()
    if not stripped:
        raise MalformedSelectorError("Item ID must not be empty.")
    return stripped


class LibraryService:
    """Stateless service for item operations.

    Parameters
    ----------
    api:
        Any object satisfying the :class:`LibraryApi` protocol.
    """

    def __init__(self, api: LibraryApi) -> None:
        self._api: LibraryApi = api

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def whoami(self) -> Account:
        return responses.parse_account(call_api(self._api.whoami))

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def list_items(self) -> ItemListing:
        return responses.parse_item_listing(call_api(self._api.list_items))

    def read(self, raw_selector: str) -> ReadResult:
        """Read pages for ``id:range`` entries.

        Every entry needs an explicit range.  Repeated IDs are passed
        through as independent requests (different ranges of one item).

        Raises
        ------
        MalformedSelectorError
            If *raw_selector* violates the selector grammar.
        """
        selector = parse_selector(raw_selector, require_range=True, unique=False)
        raw = call_api(lambda: self._api.batch_read(selector))
        return responses.parse_read_result(raw)

    def toc(self, raw_ids: str) -> TocResult:
        """Fetch tables of contents for a set of item IDs.

        Raises
        ------
        MalformedSelectorError
            On empty input, empty entries, or page ranges.
        DuplicateIdentifierError
            If an ID is listed twice.
        """
        ids = parse_id_list(raw_ids, unique=True)
        raw = call_api(lambda: self._api.batch_toc(ids))
        return responses.parse_toc_result(raw)

    def get_content(self, item_id: str) -> DocumentContent:
        item_id = validate_item_id(item_id)
        raw = call_api(lambda: self._api.get_content(item_id))
        return responses.parse_document_content(raw)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def remove(self, ids: Sequence[str]) -> DeleteResult:
        """Delete items whose IDs were parsed with :func:`parse_id_list`."""
        if not ids:
            raise MalformedSelectorError("No item IDs provided.")
        raw = call_api(lambda: self._api.delete_items(list(ids)))
        return responses.parse_delete_result(raw)

    def add(
        self,
        upload: UploadFile,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> UploadReceipt:
        """Upload a local document in three steps.

        1. Request a presigned upload target.
        2. PUT the file body to it.
        3. Confirm, which creates the server-side processing job.
        """
        ticket = responses.parse_upload_ticket(
            call_api(lambda: self._api.create_upload(upload)),
        )
        call_api(
            lambda: self._api.upload_file(
                ticket.upload_url,
                upload,
                progress_callback=progress_callback,
            )
        )
        raw = call_api(lambda: self._api.confirm_upload(ticket.item_id, ticket.storage_key))
        return responses.parse_upload_receipt(raw)

    def enrich(
        self,
        item_id: str,
        *,
        title: str | None = None,
        author: str | None = None,
        description: str | None = None,
        toc: str | None = None,
        confidence: float | None = None,
    ) -> EnrichedItem:
        """Validate enrichment flags and send them for *item_id*.

        Raises
        ------
        EmptyEnrichmentRequestError
            If no metadata field was supplied.
        InvalidTocJsonError, InvalidTocEntryError
            If the ``--toc`` payload is rejected.
        """
        request = parse_enrichment(
            title=title,
            author=author,
            description=description,
            toc=toc,
            confidence=confidence,
        )
        return self.send_enrichment(validate_item_id(item_id), request)

    def send_enrichment(self, item_id: str, request: EnrichmentRequest) -> EnrichedItem:
        """Send an already validated enrichment *request* for *item_id*."""
        raw = call_api(lambda: self._api.enrich_item(item_id, request))
        return responses.parse_enriched_item(
            raw,
            toc_entries=len(request.toc) if request.toc is not None else 0,
        )

    def flag(self, item_id: str) -> FlaggedItem:
        item_id = validate_item_id(item_id)
        return responses.parse_flagged_item(call_api(lambda: self._api.flag_item(item_id)))

    def create_markdown(
        self,
        title: str,
        *,
        description: str | None = None,
        content: str | None = None,
    ) -> MarkdownDocument:
        stripped = title.strip()
        if not stripped:
            raise InputValidationError("Document title must not be blank.")
        raw: dict[str, Any] = call_api(
            lambda: self._api.create_markdown(stripped, description, content),
        )
        return responses.parse_markdown_document(raw)

    def put_content(self, item_id: str, content: str) -> ContentUpdate:
        """Replace a markdown document's body.

        Raises
        ------
        EmptyContentError
            If *content* is blank.
        """
        item_id = validate_item_id(item_id)
        body = require_content(content)
        raw = call_api(lambda: self._api.put_content(item_id, body))
        return responses.parse_content_update(raw)
