"""Infrastructure: local document files and stdin.

The only place that touches user-supplied paths.  ``OSError`` is
re-raised as :class:`~candlekeep_cli.exceptions.InputFileError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from candlekeep_cli.core.models import UploadFile
from candlekeep_cli.core.uploads import content_type_for
from candlekeep_cli.exceptions import InputFileError


def inspect_upload(raw_path: str) -> UploadFile:
    """Check that *raw_path* is an uploadable file and describe it.

    Raises
    ------
    InputFileError
        If the path does not exist or is not a regular file.
    UnsupportedFileTypeError
        If the file is neither PDF nor Markdown.
    """
    path = Path(raw_path).expanduser()
    if not path.exists():
        raise InputFileError(f"File not found: {raw_path}")
    if not path.is_file():
        raise InputFileError(f"Not a regular file: {raw_path}")

    content_type = content_type_for(path)
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise InputFileError(f"Failed to read file metadata: {raw_path}") from exc

    return UploadFile(
        path=path,
        filename=path.name,
        size=size,
        content_type=content_type,
    )


def read_text_input(raw_path: str | None, stdin: TextIO) -> str:
    """Return the text of *raw_path*, or everything on *stdin* when ``None``."""
    if raw_path is None:
        try:
            return stdin.read()
        except OSError as exc:
            raise InputFileError(f"Failed to read from stdin: {exc}") from exc

    path = Path(raw_path).expanduser()
    if not path.exists():
        raise InputFileError(f"File not found: {raw_path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputFileError(f"Failed to read file: {raw_path}") from exc
