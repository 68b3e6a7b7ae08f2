"""Pure parsing of item/page selectors.

A selector is a comma-separated list of ``identifier[:range]`` tokens,
where the range is ``all`` or ``<start>-<end>``::

    abc:1-5,def:all,ghi:7-7

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic.  Violations raise a typed
:class:`~candlekeep_cli.exceptions.InputValidationError` subclass; the
command layer decides how to present it.

Duplicate identifiers are a per-command policy: callers that treat the
selector as a set pass ``unique=True``.
"""

from __future__ import annotations

import re

from candlekeep_cli.core.models import PageRange, Selector, SelectorEntry
from candlekeep_cli.exceptions import DuplicateIdentifierError, MalformedSelectorError

_RANGE_RE = re.compile(r"^\s*(\S+?)\s*-\s*(\S+)\s*$")

_FORMAT_HELP = "\n".join(
    (
        "Formats:",
        "  id:all    - all pages",
        "  id:1-5    - pages 1 through 5",
        "  id:3-3    - page 3 only",
    )
)


# ---------------------------------------------------------------------------
# Range tokens
# ---------------------------------------------------------------------------

def _parse_bound(token: str, entry: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise MalformedSelectorError(
            f"Page bound '{token}' is not a positive integer in: '{entry}'",
            hint=_FORMAT_HELP,
        )
    value = int(token)
    if value < 1:
        raise MalformedSelectorError(
            f"Pages are numbered from 1, got {value} in: '{entry}'",
        )
    return value


def parse_page_range(token: str, entry: str = "") -> PageRange:
    """Parse ``all`` or ``<start>-<end>`` into a :class:`PageRange`.

    *entry* is the enclosing selector token, used only in messages.
    """
    entry = entry or token
    stripped = token.strip()
    if stripped.lower() == "all":
        return PageRange()

    match = _RANGE_RE.match(stripped)
    if match is None:
        raise MalformedSelectorError(
            f"Invalid page range '{stripped}' in: '{entry}'",
            hint=_FORMAT_HELP,
        )

    start = _parse_bound(match.group(1), entry)
    end = _parse_bound(match.group(2), entry)
    if start > end:
        raise MalformedSelectorError(
            f"Range start {start} is after range end {end} in: '{entry}'",
        )
    return PageRange(start, end)


# ---------------------------------------------------------------------------
# Full selectors
# ---------------------------------------------------------------------------

def _split_entries(raw: str) -> list[str]:
    """Split on commas, rejecting empty input and empty entries."""
    if not raw.strip():
        raise MalformedSelectorError(
            "No item IDs provided.",
            hint=_FORMAT_HELP,
        )
    parts = [part.strip() for part in raw.split(",")]
    if any(not part for part in parts):
        raise MalformedSelectorError(
            f"Empty entry in selector: '{raw.strip()}'",
            hint="Remove the leading, trailing, or doubled comma.",
        )
    return parts


def _parse_entry(part: str) -> SelectorEntry:
    identifier, sep, range_token = part.partition(":")
    identifier = identifier.strip()
    if not identifier:
        raise MalformedSelectorError(f"Empty ID found in: '{part}'")
    if not sep:
        return SelectorEntry(identifier=identifier, pages=None)
    return SelectorEntry(
        identifier=identifier,
        pages=parse_page_range(range_token, part),
    )


def parse_selector(
    raw: str,
    *,
    require_range: bool = True,
    unique: bool = False,
) -> Selector:
    """Parse a selector string into a validated :class:`Selector`.

    Parameters
    ----------
    raw:
        User input such as ``"abc:1-5,def:all"``.
    require_range:
        When ``True`` every identifier must carry an explicit range.
        All identifiers lacking one are reported in a single error.
    unique:
        When ``True`` a repeated identifier raises
        :class:`DuplicateIdentifierError`.

    Raises
    ------
    MalformedSelectorError
        On any grammar violation.
    DuplicateIdentifierError
        On a repeated identifier when *unique* is set.
    """
    entries: list[SelectorEntry] = []
    missing_ranges: list[str] = []
    seen: set[str] = set()

    for part in _split_entries(raw):
        entry = _parse_entry(part)
        if unique and entry.identifier in seen:
            raise DuplicateIdentifierError(
                entry.identifier,
                hint="Each ID may appear only once for this command.",
            )
        seen.add(entry.identifier)
        if require_range and entry.pages is None:
            missing_ranges.append(entry.identifier)
        entries.append(entry)

    if missing_ranges:
        example = ",".join(f"{identifier}:all" for identifier in missing_ranges)
        raise MalformedSelectorError(
            f"Missing page range for: {', '.join(missing_ranges)}",
            hint="\n".join(
                (
                    "Every ID must specify a page range. Use 'all' for all pages.",
                    f"Example: {example}",
                    _FORMAT_HELP,
                )
            ),
        )

    return Selector(entries=tuple(entries))


def parse_id_list(raw: str, *, unique: bool = True) -> tuple[str, ...]:
    """Parse a plain comma-separated ID list (no page ranges allowed).

    Used by commands that address whole items or sources.
    """
    selector = parse_selector(raw, require_range=False, unique=unique)
    for entry in selector:
        if entry.pages is not None:
            raise MalformedSelectorError(
                f"Page ranges are not accepted here: '{entry.identifier}:{entry.pages}'",
                hint="Pass bare IDs separated by commas.",
            )
    return selector.identifiers
