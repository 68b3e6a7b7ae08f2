"""Infrastructure layer — external system integration.

This layer wraps all interaction with the CandleKeep HTTP API, the
local config directory, and user-supplied files.  Every raw
third-party exception must be caught here and re-raised as a
:class:`~candlekeep_cli.exceptions.CandleKeepError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from candlekeep_cli.infra.api_client import CandleKeepClient
from candlekeep_cli.infra.config_store import AppConfig, ConfigStore, config_dir
from candlekeep_cli.infra.local_files import inspect_upload, read_text_input
from candlekeep_cli.infra.session_file import SessionFile

__all__: list[str] = [
    "AppConfig",
    "CandleKeepClient",
    "ConfigStore",
    "SessionFile",
    "config_dir",
    "inspect_upload",
    "read_text_input",
]
