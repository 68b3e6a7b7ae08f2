"""Per-invocation state shared by every command handler.

Built once in :func:`candlekeep_cli.cli.app.main` from the global
flags.  Config and the active session are read on demand so that
commands which never talk to the API (``doctor``, ``auth logout``)
still run when the config file is damaged.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from candlekeep_cli.core.models import SessionContext
from candlekeep_cli.core.session_service import resolve_session_context
from candlekeep_cli.exceptions import NotAuthenticatedError
from candlekeep_cli.infra.api_client import CandleKeepClient
from candlekeep_cli.infra.config_store import AppConfig, ConfigStore
from candlekeep_cli.infra.session_file import SessionFile


@dataclass(frozen=True, slots=True)
class CommandContext:
    """Global flags plus the local stores they apply to."""

    json_output: bool = False
    session_flag: str | None = None
    no_session: bool = False
    config_store: ConfigStore = field(default_factory=ConfigStore)
    session_store: SessionFile = field(default_factory=SessionFile)

    def load_config(self) -> AppConfig:
        return self.config_store.load()

    def session_context(self) -> SessionContext:
        return resolve_session_context(self.session_flag, self.no_session, self.session_store)

    def open_client(
        self,
        config: AppConfig | None = None,
        *,
        api_key: str | None = None,
        track: bool = True,
    ) -> CandleKeepClient:
        """Build an API client for *config* (loaded when omitted).

        Parameters
        ----------
        api_key:
            Use this key instead of the stored one (``auth login``).
        track:
            Attach the active access session, if any.

        Raises
        ------
        NotAuthenticatedError
            If no API key is available.
        """
        config = config if config is not None else self.load_config()
        key = api_key or config.api_key
        if not key:
            raise NotAuthenticatedError(
                "Not logged in.",
                hint="Run 'ck auth login' first.",
            )
        session = self.session_context() if track else SessionContext(disabled=True)
        return CandleKeepClient(config.api_url, key, session=session)
