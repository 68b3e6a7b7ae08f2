"""Tests for access-session handling (core/session_service.py).

Both the API and the session store are mocked.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from candlekeep_cli.core.models import SessionContext
from candlekeep_cli.core.session_service import AccessSessionService, resolve_session_context
from candlekeep_cli.exceptions import ApiConnectionError


def _store(stored: str | None = None) -> MagicMock:
    store = MagicMock()
    store.read.return_value = stored
    return store


# ---------------------------------------------------------------------------
# resolve_session_context
# ---------------------------------------------------------------------------

class TestResolveSessionContext:
    def test_no_session_wins(self) -> None:
        store = _store("stored")
        ctx = resolve_session_context("flag", True, store)
        assert ctx == SessionContext(session_id=None, disabled=True)
        assert ctx.header_value is None
        store.read.assert_not_called()

    def test_flag_beats_store(self) -> None:
        store = _store("stored")
        ctx = resolve_session_context(" flag ", False, store)
        assert ctx.header_value == "flag"
        store.read.assert_not_called()

    def test_store_used_without_flag(self) -> None:
        assert resolve_session_context(None, False, _store("stored")).header_value == "stored"

    def test_blank_flag_falls_back_to_store(self) -> None:
        assert resolve_session_context("  ", False, _store("stored")).header_value == "stored"

    def test_nothing_anywhere(self) -> None:
        assert resolve_session_context(None, False, _store()).header_value is None


# ---------------------------------------------------------------------------
# AccessSessionService
# ---------------------------------------------------------------------------

class TestStart:
    def test_writes_session_id(self) -> None:
        api = MagicMock()
        api.create_session.return_value = {"sessionId": "s1", "intent": "why"}
        store = _store()

        session = AccessSessionService(api, store).start("  why ")

        api.create_session.assert_called_once_with("why")
        store.write.assert_called_once_with("s1")
        assert session.session_id == "s1"

    def test_blank_intent_sent_as_none(self) -> None:
        api = MagicMock()
        api.create_session.return_value = {"sessionId": "s1"}
        AccessSessionService(api, _store()).start("   ")
        api.create_session.assert_called_once_with(None)

    def test_failure_writes_nothing(self) -> None:
        api = MagicMock()
        api.create_session.side_effect = ApiConnectionError("down")
        store = _store()
        with pytest.raises(ApiConnectionError):
            AccessSessionService(api, store).start()
        store.write.assert_not_called()


class TestComplete:
    def test_explicit_id(self) -> None:
        api = MagicMock()
        api.complete_session.return_value = {"sessionId": "s9", "status": "COMPLETED"}
        store = _store("stored")

        session = AccessSessionService(api, store).complete("s9")

        api.complete_session.assert_called_once_with("s9")
        store.clear.assert_called_once()
        assert session is not None
        assert session.status == "COMPLETED"

    def test_stored_id(self) -> None:
        api = MagicMock()
        api.complete_session.return_value = {"sessionId": "stored"}
        AccessSessionService(api, _store("stored")).complete()
        api.complete_session.assert_called_once_with("stored")

    def test_no_session_returns_none(self) -> None:
        api = MagicMock()
        assert AccessSessionService(api, _store()).complete() is None
        api.complete_session.assert_not_called()

    def test_store_cleared_on_failure(self) -> None:
        api = MagicMock()
        api.complete_session.side_effect = ApiConnectionError("down")
        store = _store("stored")
        with pytest.raises(ApiConnectionError):
            AccessSessionService(api, store).complete()
        store.clear.assert_called_once()
