"""File-backed implementation of :class:`~candlekeep_cli.core.protocols.SessionStore`.

The active access-session id is a single line in
``<config dir>/session``.  Session tracking must never break a command,
so read failures count as "no session" and write failures are logged.
"""

from __future__ import annotations

from pathlib import Path

from candlekeep_cli.infra.config_store import SESSION_FILE, config_dir
from candlekeep_cli.utils.logging import get_logger

log = get_logger(__name__)


class SessionFile:
    """Persist the active session id between invocations."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path if path is not None else config_dir() / SESSION_FILE

    def read(self) -> str | None:
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            log.warning("session_file_unreadable", path=str(self.path), error=str(exc))
            return None
        return value or None

    def write(self, session_id: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(session_id + "\n", encoding="utf-8")
        except OSError as exc:
            log.warning("session_file_write_failed", path=str(self.path), error=str(exc))

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            log.warning("session_file_delete_failed", path=str(self.path), error=str(exc))
