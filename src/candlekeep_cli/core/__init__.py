"""Core / service layer — input validation and request orchestration.

Rules
-----
* No ``print()`` calls and no logging.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from candlekeep_cli.core.enrichment import (
    coerce_toc_entries,
    parse_enrichment,
    parse_toc_json,
    validate_toc_entries,
)
from candlekeep_cli.core.library_service import LibraryService
from candlekeep_cli.core.models import (
    EnrichmentRequest,
    PageRange,
    Selector,
    SelectorEntry,
    SessionContext,
    TocEntry,
    UploadFile,
)
from candlekeep_cli.core.protocols import LibraryApi, SessionStore
from candlekeep_cli.core.selector import parse_id_list, parse_selector
from candlekeep_cli.core.session_service import AccessSessionService, resolve_session_context
from candlekeep_cli.core.source_service import SourceService

__all__: list[str] = [
    "AccessSessionService",
    "EnrichmentRequest",
    "LibraryApi",
    "LibraryService",
    "PageRange",
    "Selector",
    "SelectorEntry",
    "SessionContext",
    "SessionStore",
    "SourceService",
    "TocEntry",
    "UploadFile",
    "coerce_toc_entries",
    "parse_enrichment",
    "parse_id_list",
    "parse_selector",
    "parse_toc_json",
    "resolve_session_context",
    "validate_toc_entries",
]
