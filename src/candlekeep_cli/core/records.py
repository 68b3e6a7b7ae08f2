"""Response-side records returned by the core services.

Frozen dataclasses mirroring what the CandleKeep API returns, with
snake_case field names.  The CLI renders them as tables or, in
``--json`` mode, via :func:`dataclasses.asdict`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from candlekeep_cli.core.models import TocEntry


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Account:
    """The authenticated user (``auth whoami``)."""

    id: str
    email: str
    name: str | None
    tier: str
    item_limit: int
    item_count: int


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Job:
    """Server-side processing job attached to an item."""

    id: str
    type: str
    status: str
    progress: int | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class Item:
    """One library entry as listed by ``items list``."""

    id: str
    title: str
    source_type: str
    page_count: int
    created_at: str
    updated_at: str
    status: str | None = None
    description: str | None = None
    author: str | None = None
    needs_enrichment: bool = False
    enrichment_confidence: float | None = None
    enriched_at: str | None = None
    latest_job: Job | None = None

    @property
    def display_status(self) -> str:
        """Explicit status, else the latest job's status, else ``-``."""
        if self.status:
            return self.status
        if self.latest_job is not None:
            return self.latest_job.status
        return "-"


@dataclass(frozen=True, slots=True)
class QueuedItem:
    """An item waiting for metadata enrichment."""

    id: str
    title: str
    page_count: int


@dataclass(frozen=True, slots=True)
class ItemListing:
    items: tuple[Item, ...]
    enrichment_queue: tuple[QueuedItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class Page:
    id: str
    page_num: int
    content: str | None = None
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class ItemPages:
    """An item together with the pages requested by ``items read``."""

    id: str
    title: str
    page_count: int
    pages: tuple[Page, ...]
    source_type: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ReadResult:
    items: tuple[ItemPages, ...]
    not_found: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemToc:
    id: str
    title: str
    page_count: int
    toc: tuple[TocEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class TocResult:
    items: tuple[ItemToc, ...]
    not_found: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DeleteResult:
    deleted: tuple[str, ...]
    not_found: tuple[str, ...] = ()
    storage_errors: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UploadTicket:
    """Presigned upload target issued by ``POST /upload``."""

    item_id: str
    upload_url: str
    storage_key: str
    expires_at: str | None = None


@dataclass(frozen=True, slots=True)
class UploadReceipt:
    """Outcome of ``POST /upload/confirm``."""

    item_id: str
    title: str
    job_id: str
    job_status: str


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class EnrichedItem:
    id: str
    title: str
    needs_enrichment: bool
    author: str | None = None
    description: str | None = None
    enrichment_confidence: float | None = None
    enriched_at: str | None = None
    toc_entries: int = 0
    """Number of TOC entries sent with the request (client side)."""


@dataclass(frozen=True, slots=True)
class FlaggedItem:
    id: str
    title: str
    needs_enrichment: bool


# ---------------------------------------------------------------------------
# Markdown documents
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MarkdownDocument:
    """A freshly created markdown item."""

    id: str
    title: str
    page_count: int
    created_at: str
    updated_at: str
    description: str | None = None
    source_type: str = "markdown"


@dataclass(frozen=True, slots=True)
class DocumentContent:
    id: str
    title: str
    content: str
    version: int
    page_count: int
    updated_at: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ContentUpdate:
    id: str
    title: str
    version: int
    page_count: int
    updated_at: str


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Source:
    """A saved content source (post, thread, web clip)."""

    id: str
    created_at: str
    author_handle: str | None = None
    author_name: str | None = None
    content: str | None = None
    source_url: str | None = None

    @property
    def author(self) -> str:
        return self.author_handle or self.author_name or "-"


@dataclass(frozen=True, slots=True)
class SourceListing:
    sources: tuple[Source, ...]
    total: int = 0


# ---------------------------------------------------------------------------
# Access sessions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AccessSession:
    session_id: str
    status: str | None = None
    intent: str | None = None
    started_at: str | None = None
    completed_at: str | None = None
