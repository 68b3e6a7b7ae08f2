"""Regression tests for optional CLI UI dependencies (rich/questionary).

These tests verify bootstrap commands and ``--json`` output are
resilient when optional UI packages are missing, and interactive flows
fail cleanly only when UI paths are actually exercised.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
import responses

from candlekeep_cli.cli import exit_codes
from candlekeep_cli.cli.app import main
from candlekeep_cli.exceptions import MissingDependencyError

API = "https://ck.test/api/v1"


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.markup", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)
    monkeypatch.setitem(sys.modules, "rich.progress", None)


def _hide_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "questionary", None)


def test_help_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    code = main(["doctor"])
    assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)


@responses.activate
def test_json_listing_works_without_rich(
    monkeypatch: pytest.MonkeyPatch,
    logged_in: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)
    responses.add(responses.GET, f"{API}/items", json={"items": [{"id": "itm_1"}]})

    assert main(["--json", "items", "list"]) == exit_codes.SUCCESS
    assert json.loads(capsys.readouterr().out)["items"][0]["id"] == "itm_1"


@responses.activate
def test_table_listing_errors_cleanly_when_rich_missing(
    monkeypatch: pytest.MonkeyPatch,
    logged_in: Path,
) -> None:
    _hide_rich(monkeypatch)
    responses.add(responses.GET, f"{API}/items", json={"items": [{"id": "itm_1"}]})

    with pytest.raises(MissingDependencyError, match="rich is not installed"):
        main(["items", "list"])


def test_status_lines_fall_back_to_plain_text(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    assert main(["auth", "logout"]) == exit_codes.SUCCESS
    assert "Not currently logged in." in capsys.readouterr().err


@responses.activate
def test_remove_errors_cleanly_when_questionary_missing(
    monkeypatch: pytest.MonkeyPatch,
    logged_in: Path,
) -> None:
    _hide_questionary(monkeypatch)

    with pytest.raises(MissingDependencyError, match="questionary is not installed"):
        main(["items", "remove", "itm_1"])
    assert len(responses.calls) == 0


@responses.activate
def test_remove_with_yes_needs_no_questionary(
    monkeypatch: pytest.MonkeyPatch,
    logged_in: Path,
) -> None:
    _hide_questionary(monkeypatch)
    responses.add(responses.DELETE, f"{API}/items", json={"deleted": ["itm_1"]})

    assert main(["--json", "items", "remove", "itm_1", "-y"]) == exit_codes.SUCCESS


def test_login_prompt_errors_cleanly_when_questionary_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_questionary(monkeypatch)

    with pytest.raises(MissingDependencyError, match="questionary is not installed"):
        main(["auth", "login"])
