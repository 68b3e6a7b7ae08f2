"""Raw-dict → record parsers (pure).

The API speaks camelCase JSON.  These helpers convert decoded bodies
into the frozen records of :mod:`candlekeep_cli.core.records`,
tolerating missing optional keys.  Only values the client cannot work
without (e.g. an upload URL) raise
:class:`~candlekeep_cli.exceptions.UnexpectedResponseError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from candlekeep_cli.core.models import TocEntry
from candlekeep_cli.core.records import (
    Account,
    AccessSession,
    ContentUpdate,
    DeleteResult,
    DocumentContent,
    EnrichedItem,
    FlaggedItem,
    Item,
    ItemListing,
    ItemPages,
    ItemToc,
    Job,
    MarkdownDocument,
    Page,
    QueuedItem,
    ReadResult,
    Source,
    SourceListing,
    TocResult,
    UploadReceipt,
    UploadTicket,
)
from candlekeep_cli.exceptions import UnexpectedResponseError


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _str(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    return default if value is None else str(value)


def _opt_str(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    return None if value is None else str(value)


def _int(raw: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _opt_int(raw: Mapping[str, Any], key: str) -> int | None:
    if raw.get(key) is None:
        return None
    return _int(raw, key)


def _opt_float(raw: Mapping[str, Any], key: str) -> float | None:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _dicts(raw: Mapping[str, Any], key: str) -> list[dict[str, Any]]:
    """Safely pull a list of objects; malformed elements are skipped."""
    value: object = raw.get(key)
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def _strings(raw: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value: object = raw.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(str(entry) for entry in value)


def _required(raw: Mapping[str, Any], key: str, what: str) -> str:
    value = raw.get(key)
    if value is None or value == "":
        raise UnexpectedResponseError(f"{what} response is missing '{key}'.")
    return str(value)


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

def parse_account(raw: Mapping[str, Any]) -> Account:
    return Account(
        id=_str(raw, "id"),
        email=_str(raw, "email"),
        name=_opt_str(raw, "name"),
        tier=_str(raw, "tier", "unknown"),
        item_limit=_int(raw, "itemLimit"),
        item_count=_int(raw, "itemCount"),
    )


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

def parse_job(raw: Mapping[str, Any]) -> Job:
    return Job(
        id=_str(raw, "id"),
        type=_str(raw, "type"),
        status=_str(raw, "status", "UNKNOWN"),
        progress=_opt_int(raw, "progress"),
        error=_opt_str(raw, "error"),
    )


def parse_item(raw: Mapping[str, Any]) -> Item:
    job = raw.get("latestJob")
    return Item(
        id=_str(raw, "id"),
        title=_str(raw, "title", "Untitled"),
        source_type=_str(raw, "sourceType"),
        page_count=_int(raw, "pageCount"),
        created_at=_str(raw, "createdAt"),
        updated_at=_str(raw, "updatedAt"),
        status=_opt_str(raw, "status"),
        description=_opt_str(raw, "description"),
        author=_opt_str(raw, "author"),
        needs_enrichment=bool(raw.get("needsEnrichment") or False),
        enrichment_confidence=_opt_float(raw, "enrichmentConfidence"),
        enriched_at=_opt_str(raw, "enrichedAt"),
        latest_job=parse_job(job) if isinstance(job, dict) else None,
    )


def parse_item_listing(raw: Mapping[str, Any]) -> ItemListing:
    return ItemListing(
        items=tuple(parse_item(entry) for entry in _dicts(raw, "items")),
        enrichment_queue=tuple(
            QueuedItem(
                id=_str(entry, "id"),
                title=_str(entry, "title", "Untitled"),
                page_count=_int(entry, "pageCount"),
            )
            for entry in _dicts(raw, "enrichmentQueue")
        ),
    )


def _parse_page(raw: Mapping[str, Any]) -> Page:
    metadata = raw.get("metadata")
    return Page(
        id=_str(raw, "id"),
        page_num=_int(raw, "pageNum"),
        content=_opt_str(raw, "content"),
        metadata=metadata if isinstance(metadata, dict) else None,
    )


def parse_read_result(raw: Mapping[str, Any]) -> ReadResult:
    items = tuple(
        ItemPages(
            id=_str(entry, "id"),
            title=_str(entry, "title", "Untitled"),
            page_count=_int(entry, "pageCount"),
            pages=tuple(_parse_page(page) for page in _dicts(entry, "pages")),
            source_type=_opt_str(entry, "sourceType"),
            description=_opt_str(entry, "description"),
        )
        for entry in _dicts(raw, "items")
    )
    return ReadResult(items=items, not_found=_strings(raw, "notFound"))


def _parse_server_toc(raw: Mapping[str, Any]) -> TocEntry:
    # Server TOCs are displayed as-is, not re-validated.
    level = _opt_int(raw, "level")
    return TocEntry(
        title=_str(raw, "title"),
        page=_int(raw, "page"),
        level=level if level is not None else 1,
    )


def parse_toc_result(raw: Mapping[str, Any]) -> TocResult:
    items = tuple(
        ItemToc(
            id=_str(entry, "id"),
            title=_str(entry, "title", "Untitled"),
            page_count=_int(entry, "pageCount"),
            toc=tuple(_parse_server_toc(toc) for toc in _dicts(entry, "toc")),
        )
        for entry in _dicts(raw, "items")
    )
    return TocResult(items=items, not_found=_strings(raw, "notFound"))


def parse_delete_result(raw: Mapping[str, Any]) -> DeleteResult:
    return DeleteResult(
        deleted=_strings(raw, "deleted"),
        not_found=_strings(raw, "notFound"),
        storage_errors=_strings(raw, "storageErrors"),
    )


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

def parse_upload_ticket(raw: Mapping[str, Any]) -> UploadTicket:
    return UploadTicket(
        item_id=_required(raw, "itemId", "Upload"),
        upload_url=_required(raw, "uploadUrl", "Upload"),
        storage_key=_required(raw, "storageKey", "Upload"),
        expires_at=_opt_str(raw, "expiresAt"),
    )


def parse_upload_receipt(raw: Mapping[str, Any]) -> UploadReceipt:
    item = raw.get("item") if isinstance(raw.get("item"), dict) else {}
    job = raw.get("job") if isinstance(raw.get("job"), dict) else {}
    return UploadReceipt(
        item_id=_str(item, "id"),
        title=_str(item, "title", "Untitled"),
        job_id=_str(job, "id"),
        job_status=_str(job, "status", "UNKNOWN"),
    )


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------

def _item_body(raw: Mapping[str, Any], what: str) -> Mapping[str, Any]:
    item = raw.get("item")
    if not isinstance(item, dict):
        raise UnexpectedResponseError(f"{what} response is missing 'item'.")
    return item


def parse_enriched_item(raw: Mapping[str, Any], *, toc_entries: int = 0) -> EnrichedItem:
    item = _item_body(raw, "Enrich")
    return EnrichedItem(
        id=_str(item, "id"),
        title=_str(item, "title", "Untitled"),
        needs_enrichment=bool(item.get("needsEnrichment") or False),
        author=_opt_str(item, "author"),
        description=_opt_str(item, "description"),
        enrichment_confidence=_opt_float(item, "enrichmentConfidence"),
        enriched_at=_opt_str(item, "enrichedAt"),
        toc_entries=toc_entries,
    )


def parse_flagged_item(raw: Mapping[str, Any]) -> FlaggedItem:
    item = _item_body(raw, "Flag")
    return FlaggedItem(
        id=_str(item, "id"),
        title=_str(item, "title", "Untitled"),
        needs_enrichment=bool(item.get("needsEnrichment", True)),
    )


# ---------------------------------------------------------------------------
# Markdown documents
# ---------------------------------------------------------------------------

def parse_markdown_document(raw: Mapping[str, Any]) -> MarkdownDocument:
    return MarkdownDocument(
        id=_str(raw, "id"),
        title=_str(raw, "title", "Untitled"),
        page_count=_int(raw, "pageCount"),
        created_at=_str(raw, "createdAt"),
        updated_at=_str(raw, "updatedAt"),
        description=_opt_str(raw, "description"),
        source_type=_str(raw, "sourceType", "markdown"),
    )


def parse_document_content(raw: Mapping[str, Any]) -> DocumentContent:
    content = raw.get("content")
    if not isinstance(content, str):
        raise UnexpectedResponseError("Content response is missing 'content'.")
    return DocumentContent(
        id=_str(raw, "id"),
        title=_str(raw, "title", "Untitled"),
        content=content,
        version=_int(raw, "version"),
        page_count=_int(raw, "pageCount"),
        updated_at=_str(raw, "updatedAt"),
        description=_opt_str(raw, "description"),
    )


def parse_content_update(raw: Mapping[str, Any]) -> ContentUpdate:
    return ContentUpdate(
        id=_str(raw, "id"),
        title=_str(raw, "title", "Untitled"),
        version=_int(raw, "version"),
        page_count=_int(raw, "pageCount"),
        updated_at=_str(raw, "updatedAt"),
    )


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def parse_source_listing(raw: Mapping[str, Any]) -> SourceListing:
    sources = tuple(
        Source(
            id=_str(entry, "id"),
            created_at=_str(entry, "createdAt"),
            author_handle=_opt_str(entry, "authorHandle"),
            author_name=_opt_str(entry, "authorName"),
            content=_opt_str(entry, "content"),
            source_url=_opt_str(entry, "sourceUrl"),
        )
        for entry in _dicts(raw, "sources")
    )
    return SourceListing(sources=sources, total=_int(raw, "total", len(sources)))


# ---------------------------------------------------------------------------
# Access sessions
# ---------------------------------------------------------------------------

def parse_access_session(raw: Mapping[str, Any]) -> AccessSession:
    return AccessSession(
        session_id=_required(raw, "sessionId", "Session"),
        status=_opt_str(raw, "status"),
        intent=_opt_str(raw, "intent"),
        started_at=_opt_str(raw, "startedAt"),
        completed_at=_opt_str(raw, "completedAt"),
    )
