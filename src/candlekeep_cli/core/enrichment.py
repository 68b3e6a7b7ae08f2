"""Pure validation of enrichment payloads and table-of-contents entries.

Pipeline for ``--toc`` (enforced by :func:`parse_toc_json`):

1. **Decode** — generic JSON decoding; must yield an array.
2. **Coerce** — each element is converted field-by-field into a typed
   :class:`~candlekeep_cli.core.models.TocEntry`.
3. **Validate** — :func:`validate_toc_entries` applies the value rules.

Step 3 is usable on its own so that entries built by other means go
through the same rule set.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from candlekeep_cli.core.models import EnrichmentRequest, TocEntry
from candlekeep_cli.exceptions import (
    BlankEnrichmentFieldError,
    EmptyEnrichmentRequestError,
    InvalidConfidenceError,
    InvalidTocEntryError,
    InvalidTocJsonError,
)

TOC_EXAMPLE = '[{"title":"Chapter 1","page":1,"level":1}]'


# ---------------------------------------------------------------------------
# 3. Validate
# ---------------------------------------------------------------------------

def validate_toc_entries(entries: Sequence[TocEntry]) -> None:
    """Check every entry against the TOC rules.

    Raises :class:`InvalidTocEntryError` for the first offending entry.
    """
    for index, entry in enumerate(entries):
        if not entry.title.strip():
            raise InvalidTocEntryError(index, "title must not be empty")
        if entry.page < 1:
            raise InvalidTocEntryError(index, f"page must be >= 1, got {entry.page}")
        if entry.level < 1:
            raise InvalidTocEntryError(index, f"level must be >= 1, got {entry.level}")


# ---------------------------------------------------------------------------
# 2. Coerce
# ---------------------------------------------------------------------------

def _require_int(value: object, index: int, name: str) -> int:
    # bool is an int subclass; JSON true/false is never a page number.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTocEntryError(index, f"{name} must be an integer")
    return value


def _coerce_entry(raw: object, index: int) -> TocEntry:
    if not isinstance(raw, dict):
        raise InvalidTocEntryError(index, "entry must be an object")

    title = raw.get("title")
    if not isinstance(title, str):
        raise InvalidTocEntryError(index, "title must be a string")

    if "page" not in raw:
        raise InvalidTocEntryError(index, "page is required")
    page = _require_int(raw["page"], index, "page")

    raw_level = raw.get("level")
    level = 1 if raw_level is None else _require_int(raw_level, index, "level")

    return TocEntry(title=title.strip(), page=page, level=level)


def coerce_toc_entries(raw_items: Sequence[Any]) -> tuple[TocEntry, ...]:
    """Convert decoded JSON values into validated :class:`TocEntry` objects.

    Order is preserved exactly as given.
    """
    entries = tuple(_coerce_entry(raw, index) for index, raw in enumerate(raw_items))
    validate_toc_entries(entries)
    return entries


# ---------------------------------------------------------------------------
# 1. Decode
# ---------------------------------------------------------------------------

def parse_toc_json(payload: str) -> tuple[TocEntry, ...]:
    """Decode and validate a ``--toc`` JSON array.

    Raises
    ------
    InvalidTocJsonError
        If *payload* is not well-formed JSON or not an array.
    InvalidTocEntryError
        If any element fails field-level validation.
    """
    try:
        decoded: Any = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise InvalidTocJsonError(
            f"Invalid TOC JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            hint=f"Expected format: {TOC_EXAMPLE}",
        ) from exc
    except RecursionError as exc:
        raise InvalidTocJsonError(
            "TOC JSON is nested too deeply.",
            hint=f"Expected format: {TOC_EXAMPLE}",
        ) from exc

    if not isinstance(decoded, list):
        raise InvalidTocJsonError(
            f"TOC JSON must be an array, got {type(decoded).__name__}.",
            hint=f"Expected format: {TOC_EXAMPLE}",
        )

    return coerce_toc_entries(decoded)


# ---------------------------------------------------------------------------
# Enrichment request
# ---------------------------------------------------------------------------

def _clean_text(value: str | None, flag: str) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        raise BlankEnrichmentFieldError(f"{flag} must not be blank.")
    return stripped


def parse_enrichment(
    *,
    title: str | None = None,
    author: str | None = None,
    description: str | None = None,
    toc: str | None = None,
    confidence: float | None = None,
) -> EnrichmentRequest:
    """Build a validated :class:`EnrichmentRequest` from raw flag values.

    ``None`` means the flag was not given.  The confidence score does not
    count towards the "at least one field" requirement.

    Raises
    ------
    EmptyEnrichmentRequestError
        If none of title, author, description, or toc were supplied.
    BlankEnrichmentFieldError
        If a supplied text flag is blank after trimming.
    InvalidConfidenceError
        If *confidence* lies outside ``[0.0, 1.0]``.
    InvalidTocJsonError, InvalidTocEntryError
        See :func:`parse_toc_json`.
    """
    if title is None and author is None and description is None and toc is None:
        raise EmptyEnrichmentRequestError(
            "At least one of --title, --author, --description, or --toc is required.",
        )

    if confidence is not None and not 0.0 <= confidence <= 1.0:
        raise InvalidConfidenceError(
            f"Confidence must be between 0.0 and 1.0, got {confidence}.",
        )

    return EnrichmentRequest(
        title=_clean_text(title, "--title"),
        author=_clean_text(author, "--author"),
        description=_clean_text(description, "--description"),
        confidence=confidence,
        toc=parse_toc_json(toc) if toc is not None else None,
    )
