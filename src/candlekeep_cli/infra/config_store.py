"""Infrastructure: the local config file holding the API key and base URL.

Layout of ``~/.candlekeep/config.yaml``::

    auth:
      api_key: ck_...
    api:
      url: https://www.getcandlekeep.com

Environment variables:

* ``CANDLEKEEP_HOME`` — config directory (default ``~/.candlekeep``).
* ``CANDLEKEEP_API_URL`` — overrides the stored API URL.

Every ``OSError``/``yaml.YAMLError`` is re-raised as
:class:`~candlekeep_cli.exceptions.ConfigError`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from candlekeep_cli.exceptions import ConfigError

CONFIG_FILE: str = "config.yaml"
SESSION_FILE: str = "session"
DEFAULT_API_URL: str = "https://www.getcandlekeep.com"
HOME_ENV: str = "CANDLEKEEP_HOME"
API_URL_ENV: str = "CANDLEKEEP_API_URL"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Settings for one CLI invocation."""

    api_key: str | None = None
    api_url: str = DEFAULT_API_URL

    @property
    def is_authenticated(self) -> bool:
        return bool(self.api_key)


def config_dir() -> Path:
    """Return the config directory, honouring ``CANDLEKEEP_HOME``."""
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".candlekeep"


class ConfigStore:
    """Reads and writes :class:`AppConfig` as YAML.

    Parameters
    ----------
    path:
        Config file location; defaults to ``config_dir() / config.yaml``.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path if path is not None else config_dir() / CONFIG_FILE

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to read config file: {self.path}") from exc
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(
                f"Failed to parse config file: {self.path}",
                hint="Fix the YAML by hand or delete the file and log in again.",
            ) from exc
        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ConfigError(f"Config file must contain a mapping: {self.path}")
        return document

    def _load_stored(self) -> AppConfig:
        """The file's values, ignoring environment overrides."""
        document = self._read_document()
        auth = document.get("auth") if isinstance(document.get("auth"), dict) else {}
        api = document.get("api") if isinstance(document.get("api"), dict) else {}
        api_key = auth.get("api_key")
        url = api.get("url") or DEFAULT_API_URL
        return AppConfig(
            api_key=str(api_key) if api_key else None,
            api_url=str(url).rstrip("/"),
        )

    def load(self) -> AppConfig:
        """Load the config; a missing file yields defaults.

        ``CANDLEKEEP_API_URL`` takes precedence over the stored URL.
        """
        stored = self._load_stored()
        override = os.environ.get(API_URL_ENV)
        if override:
            return replace(stored, api_url=override.rstrip("/"))
        return stored

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, config: AppConfig) -> None:
        """Write *config*, creating the directory; file mode is 0600."""
        document: dict[str, Any] = {
            "auth": {"api_key": config.api_key} if config.api_key else {},
            "api": {"url": config.api_url},
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                yaml.safe_dump(document, default_flow_style=False, sort_keys=True),
                encoding="utf-8",
            )
            os.chmod(self.path, 0o600)
        except OSError as exc:
            raise ConfigError(f"Failed to write config file: {self.path}") from exc

    def save_api_key(self, api_key: str) -> None:
        self.save(replace(self._load_stored(), api_key=api_key))

    def clear_credentials(self) -> None:
        self.save(replace(self._load_stored(), api_key=None))
