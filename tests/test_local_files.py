"""Tests for session-file persistence and local input files.

Covers infra/session_file.py, infra/local_files.py and the pure
upload rules in core/uploads.py.
"""

from __future__ import annotations

import io
from pathlib import Path, PurePath

import pytest

from candlekeep_cli.core.uploads import content_type_for, require_content
from candlekeep_cli.exceptions import EmptyContentError, InputFileError, UnsupportedFileTypeError
from candlekeep_cli.infra.local_files import inspect_upload, read_text_input
from candlekeep_cli.infra.session_file import SessionFile


# ---------------------------------------------------------------------------
# SessionFile
# ---------------------------------------------------------------------------

class TestSessionFile:
    def test_default_path_in_config_dir(self, isolated_home: Path) -> None:
        assert SessionFile().path == isolated_home / "session"

    def test_read_missing(self, tmp_path: Path) -> None:
        assert SessionFile(tmp_path / "session").read() is None

    def test_write_then_read(self, tmp_path: Path) -> None:
        store = SessionFile(tmp_path / "dir" / "session")
        store.write("s-1")
        assert store.read() == "s-1"

    def test_blank_file_is_no_session(self, tmp_path: Path) -> None:
        path = tmp_path / "session"
        path.write_text("  \n", encoding="utf-8")
        assert SessionFile(path).read() is None

    def test_clear_is_idempotent(self, tmp_path: Path) -> None:
        store = SessionFile(tmp_path / "session")
        store.write("s-1")
        store.clear()
        store.clear()
        assert store.read() is None

    def test_write_failure_does_not_raise(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        SessionFile(blocker / "session").write("s-1")

    def test_unreadable_path_is_no_session(self, tmp_path: Path) -> None:
        directory = tmp_path / "session"
        directory.mkdir()
        assert SessionFile(directory).read() is None


# ---------------------------------------------------------------------------
# Upload rules
# ---------------------------------------------------------------------------

class TestContentTypeFor:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("a.pdf", "application/pdf"),
            ("a.PDF", "application/pdf"),
            ("a.md", "text/markdown"),
            ("notes.Markdown", "text/markdown"),
        ],
    )
    def test_supported(self, name: str, expected: str) -> None:
        assert content_type_for(PurePath(name)) == expected

    @pytest.mark.parametrize("name", ["a.txt", "a.epub", "README"])
    def test_unsupported(self, name: str) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            content_type_for(PurePath(name))

    def test_message_names_missing_extension(self) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="no extension"):
            content_type_for(PurePath("README"))


class TestRequireContent:
    def test_keeps_content_verbatim(self) -> None:
        assert require_content("  # x\n") == "  # x\n"

    @pytest.mark.parametrize("content", ["", " ", "\n\t\n"])
    def test_blank(self, content: str) -> None:
        with pytest.raises(EmptyContentError):
            require_content(content)


# ---------------------------------------------------------------------------
# inspect_upload / read_text_input
# ---------------------------------------------------------------------------

class TestInspectUpload:
    def test_describes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "book.pdf"
        path.write_bytes(b"%PDF-1.4")
        upload = inspect_upload(str(path))
        assert upload.filename == "book.pdf"
        assert upload.size == 8
        assert upload.content_type == "application/pdf"
        assert upload.path == path

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(InputFileError, match="File not found"):
            inspect_upload(str(tmp_path / "nope.pdf"))

    def test_directory(self, tmp_path: Path) -> None:
        directory = tmp_path / "dir.pdf"
        directory.mkdir()
        with pytest.raises(InputFileError, match="Not a regular file"):
            inspect_upload(str(directory))

    def test_wrong_type(self, tmp_path: Path) -> None:
        path = tmp_path / "book.txt"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(UnsupportedFileTypeError):
            inspect_upload(str(path))


class TestReadTextInput:
    def test_stdin(self) -> None:
        assert read_text_input(None, io.StringIO("from stdin\n")) == "from stdin\n"

    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.md"
        path.write_text("# Doc\n", encoding="utf-8")
        assert read_text_input(str(path), io.StringIO("ignored")) == "# Doc\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InputFileError):
            read_text_input(str(tmp_path / "nope.md"), io.StringIO())

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.md"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(InputFileError):
            read_text_input(str(path), io.StringIO())
