"""Smoke tests — verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from candlekeep_cli import __version__
from candlekeep_cli.cli import exit_codes
from candlekeep_cli.cli.app import cli, main
from candlekeep_cli.exceptions import (
    AccessDeniedError,
    ApiConnectionError,
    ApiError,
    AuthenticationFailedError,
    BadRequestError,
    BlankEnrichmentFieldError,
    CandleKeepError,
    ConfigError,
    DuplicateIdentifierError,
    EmptyContentError,
    EmptyEnrichmentRequestError,
    InputFileError,
    InputValidationError,
    InvalidConfidenceError,
    InvalidTocEntryError,
    InvalidTocJsonError,
    MalformedSelectorError,
    MissingDependencyError,
    NotAuthenticatedError,
    NotFoundError,
    UnexpectedResponseError,
    UnsupportedFileTypeError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            InputValidationError,
            ConfigError,
            NotAuthenticatedError,
            ApiError,
            ApiConnectionError,
            UnexpectedResponseError,
            MissingDependencyError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[CandleKeepError]
    ) -> None:
        assert issubclass(exc_class, CandleKeepError)

    @pytest.mark.parametrize(
        "exc_class",
        [
            MalformedSelectorError,
            DuplicateIdentifierError,
            EmptyEnrichmentRequestError,
            BlankEnrichmentFieldError,
            InvalidConfidenceError,
            InvalidTocJsonError,
            InvalidTocEntryError,
            UnsupportedFileTypeError,
            InputFileError,
            EmptyContentError,
        ],
    )
    def test_input_errors_share_a_parent(self, exc_class: type[CandleKeepError]) -> None:
        assert issubclass(exc_class, InputValidationError)

    @pytest.mark.parametrize(
        "exc_class",
        [BadRequestError, AuthenticationFailedError, AccessDeniedError, NotFoundError],
    )
    def test_status_errors_are_api_errors(self, exc_class: type[ApiError]) -> None:
        err = exc_class("nope", status_code=418)
        assert isinstance(err, ApiError)
        assert err.status_code == 418

    def test_base_inherits_from_exception(self) -> None:
        assert issubclass(CandleKeepError, Exception)

    def test_hint_is_stored(self) -> None:
        err = CandleKeepError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        err = CandleKeepError("boom")
        assert err.hint is None

    def test_duplicate_identifier_keeps_identifier(self) -> None:
        err = DuplicateIdentifierError("abc")
        assert err.identifier == "abc"
        assert "abc" in str(err)

    def test_invalid_toc_entry_keeps_position(self) -> None:
        err = InvalidTocEntryError(2, "page must be >= 1, got 0")
        assert err.index == 2
        assert str(err) == "Invalid TOC entry at index 2: page must be >= 1, got 0"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2


# ---------------------------------------------------------------------------
# CLI routing (skeleton)
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """No arguments should print help and exit 0."""
        code = main([])
        assert code == exit_codes.SUCCESS
        assert "usage: ck" in capsys.readouterr().out

    def test_group_without_command_prints_group_help(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["items"])
        assert code == exit_codes.SUCCESS
        assert "usage: ck items" in capsys.readouterr().out

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_access_group_is_hidden_from_help(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main([])
        assert "access" not in capsys.readouterr().out

    @patch("candlekeep_cli.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_returns_success(self, _mock_doc: object) -> None:
        code = main(["doctor"])
        assert code == exit_codes.SUCCESS

    def test_session_flags_are_mutually_exclusive(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--session", "s1", "--no-session", "doctor"])
        assert exc_info.value.code == 2

    def test_session_flags_conflict_across_levels(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--session", "s1", "items", "list", "--no-session"])
        assert exc_info.value.code == 2


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run_cli(self, side_effect: BaseException) -> int:
        with patch("candlekeep_cli.cli.app.main", side_effect=side_effect):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        return int(exc_info.value.code)

    def test_known_error_exits_one_with_hint(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run_cli(NotAuthenticatedError("Not logged in.", hint="Run 'ck auth login' first."))
        assert code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "Not logged in." in err
        assert "ck auth login" in err

    def test_keyboard_interrupt_exits_130(self) -> None:
        assert self._run_cli(KeyboardInterrupt()) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error_exits_two(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run_cli(RuntimeError("kaboom"))
        assert code == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError" in capsys.readouterr().err

    def test_success_exits_zero(self) -> None:
        with patch("candlekeep_cli.cli.app.main", return_value=exit_codes.SUCCESS):
            with pytest.raises(SystemExit) as exc_info:
                cli()
        assert exc_info.value.code == exit_codes.SUCCESS
