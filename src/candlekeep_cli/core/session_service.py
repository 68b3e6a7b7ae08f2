"""Access-session lifecycle: start → attached to commands → complete.

The active session id lives in a :class:`SessionStore` between process
invocations.  Each command resolves it into an explicit
:class:`~candlekeep_cli.core.models.SessionContext` value that is then
handed to the API client; nothing is cached in module state.
"""

from __future__ import annotations

from candlekeep_cli.core import responses
from candlekeep_cli.core.library_service import call_api
from candlekeep_cli.core.models import SessionContext
from candlekeep_cli.core.protocols import LibraryApi, SessionStore
from candlekeep_cli.core.records import AccessSession


def resolve_session_context(
    session_flag: str | None,
    no_session: bool,
    store: SessionStore,
) -> SessionContext:
    """Decide which session id (if any) to attach to this invocation.

    Precedence: ``--no-session`` > ``--session ID`` > stored session.
    The store is not consulted at all when tracking is disabled.
    """
    if no_session:
        return SessionContext(session_id=None, disabled=True)
    if session_flag is not None and session_flag.strip():
        return SessionContext(session_id=session_flag.strip())
    return SessionContext(session_id=store.read())


class AccessSessionService:
    """Starts and completes research sessions.

    Parameters
    ----------
    api:
        Any object satisfying the :class:`LibraryApi` protocol.
    store:
        Where the active session id is remembered between runs.
    """

    def __init__(self, api: LibraryApi, store: SessionStore) -> None:
        self._api: LibraryApi = api
        self._store: SessionStore = store

    def start(self, intent: str | None = None) -> AccessSession:
        """Open a session on the server and remember its id."""
        cleaned = intent.strip() if intent is not None else None
        raw = call_api(lambda: self._api.create_session(cleaned or None))
        session = responses.parse_access_session(raw)
        self._store.write(session.session_id)
        return session

    def complete(self, session_id: str | None = None) -> AccessSession | None:
        """Close *session_id*, or the stored session when omitted.

        Returns ``None`` when there is no session to complete.  The
        stored id is forgotten even when the server call fails.
        """
        target = session_id or self._store.read()
        if not target:
            return None
        try:
            raw = call_api(lambda: self._api.complete_session(target))
        finally:
            self._store.clear()
        return responses.parse_access_session(raw)
