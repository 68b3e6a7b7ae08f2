"""Core service for saved content sources."""

from __future__ import annotations

from collections.abc import Sequence

from candlekeep_cli.core import responses
from candlekeep_cli.core.library_service import call_api
from candlekeep_cli.core.protocols import LibraryApi
from candlekeep_cli.core.records import DeleteResult, SourceListing
from candlekeep_cli.exceptions import InputValidationError, MalformedSelectorError

DEFAULT_LIMIT: int = 50


class SourceService:
    """Stateless service for listing and deleting sources."""

    def __init__(self, api: LibraryApi) -> None:
        self._api: LibraryApi = api

    def list(self, limit: int | None = None) -> SourceListing:
        limit = DEFAULT_LIMIT if limit is None else limit
        if limit < 1:
            raise InputValidationError(f"--limit must be at least 1, got {limit}.")
        return responses.parse_source_listing(call_api(lambda: self._api.list_sources(limit)))

    def delete(self, ids: Sequence[str]) -> DeleteResult:
        if not ids:
            raise MalformedSelectorError("No source IDs provided.")
        raw = call_api(lambda: self._api.delete_sources(list(ids)))
        return responses.parse_delete_result(raw)
