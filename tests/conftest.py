"""Shared pytest fixtures and configuration for the candlekeep-cli test suite.

Guidelines
----------
* No internet access in any test — HTTP is mocked with ``responses``.
* The config directory is redirected to ``tmp_path`` for every test.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from candlekeep_cli.infra.config_store import API_URL_ENV, HOME_ENV
from candlekeep_cli.utils.logging import remove_handler

API_URL = "https://ck.test"


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a fresh temp dir."""
    home = tmp_path / "candlekeep-home"
    monkeypatch.setenv(HOME_ENV, str(home))
    monkeypatch.delenv(API_URL_ENV, raising=False)
    return home


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo ``configure_logging`` so no test writes to a closed capture stream."""
    root = logging.getLogger()
    level = root.level
    yield
    structlog.reset_defaults()
    remove_handler(root)
    root.setLevel(level)


@pytest.fixture()
def logged_in(isolated_home: Path) -> Path:
    """Write a config file holding an API key and the test API URL."""
    isolated_home.mkdir(parents=True, exist_ok=True)
    config_file = isolated_home / "config.yaml"
    config_file.write_text(
        f"auth:\n  api_key: ck_test_key\napi:\n  url: {API_URL}\n",
        encoding="utf-8",
    )
    return config_file
