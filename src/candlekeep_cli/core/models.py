"""Request-side domain models for candlekeep-cli.

All models are **frozen** dataclasses — immutable value objects built
by the validation core and handed to the API client.  They carry zero
I/O and zero dependencies on external packages.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PageRange:
    """Either every page of an item or a closed, 1-based page interval.

    ``PageRange()`` means *all pages*; ``PageRange(3, 7)`` means pages
    3 through 7 inclusive.  A single page is ``PageRange(n, n)``.
    """

    start: int | None = None
    end: int | None = None

    @property
    def is_all(self) -> bool:
        return self.start is None

    @property
    def pages(self) -> range | None:
        """Page numbers covered, or ``None`` for the all-pages variant."""
        if self.start is None or self.end is None:
            return None
        return range(self.start, self.end + 1)

    def __str__(self) -> str:
        if self.start is None:
            return "all"
        return f"{self.start}-{self.end}"


@dataclass(frozen=True, slots=True)
class SelectorEntry:
    """One ``identifier[:range]`` token of a selector."""

    identifier: str
    """Item or source identifier, trimmed."""

    pages: PageRange | None
    """Requested pages; ``None`` when the token carried no range."""


@dataclass(frozen=True, slots=True)
class Selector:
    """Ordered, immutable sequence of :class:`SelectorEntry` values."""

    entries: tuple[SelectorEntry, ...]

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(entry.identifier for entry in self.entries)

    def __iter__(self) -> Iterator[SelectorEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return len(self.entries) > 0


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TocEntry:
    """A single table-of-contents line."""

    title: str
    page: int
    level: int = 1
    """Hierarchical depth; ``1`` is top level."""


@dataclass(frozen=True, slots=True)
class EnrichmentRequest:
    """Validated metadata correction for one item.

    At least one of ``title``, ``author``, ``description`` or ``toc`` is
    always set — the parser refuses to build an empty request.
    """

    title: str | None = None
    author: str | None = None
    description: str | None = None
    confidence: float | None = None
    toc: tuple[TocEntry, ...] | None = None


# ---------------------------------------------------------------------------
# Session tracking
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SessionContext:
    """Access-session settings attached to outgoing requests.

    Passed explicitly to the API client for each invocation; nothing
    about the session is held in module-level state.
    """

    session_id: str | None = None
    disabled: bool = False

    @property
    def header_value(self) -> str | None:
        """The id to send, or ``None`` when nothing should be attached."""
        if self.disabled:
            return None
        return self.session_id


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UploadFile:
    """A local document that passed type and existence checks."""

    path: Path
    filename: str
    size: int
    content_type: str
