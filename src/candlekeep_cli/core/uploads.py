"""Pure upload rules — which files the library accepts.

Filesystem access (existence, size) is the infrastructure layer's job;
this module only decides from the file name.
"""

from __future__ import annotations

from pathlib import PurePath

from candlekeep_cli.exceptions import EmptyContentError, UnsupportedFileTypeError

CONTENT_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
}


def content_type_for(path: PurePath) -> str:
    """Return the upload MIME type for *path* based on its extension.

    Raises
    ------
    UnsupportedFileTypeError
        For anything other than PDF or Markdown.
    """
    suffix = path.suffix.lower()
    try:
        return CONTENT_TYPES[suffix]
    except KeyError:
        got = suffix.lstrip(".") or "no extension"
        raise UnsupportedFileTypeError(
            f"Unsupported file type: {got}",
            hint="Only PDF (.pdf) and Markdown (.md, .markdown) files are supported.",
        ) from None


def require_content(content: str) -> str:
    """Return *content* unchanged, rejecting whitespace-only bodies."""
    if not content.strip():
        raise EmptyContentError(
            "No content provided.",
            hint="Pass --file PATH or pipe the document on stdin.",
        )
    return content
