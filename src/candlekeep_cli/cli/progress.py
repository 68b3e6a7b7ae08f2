"""Rich-based upload progress display.

:class:`RichUploadProgress` is the ``progress_callback`` handed to
:meth:`LibraryService.add`; the infra layer calls it with
``(bytes_sent, total_bytes)`` as the file body is streamed.

Design
------
* Shutdown-safe: once stopped, further callbacks are ignored.
* Renders on stderr, so stdout stays free for command output.
"""

from __future__ import annotations

from typing import Any

from candlekeep_cli.cli.console import escape, get_rich_console
from candlekeep_cli.exceptions import MissingDependencyError


class RichUploadProgress:
    """Callable progress adapter for Rich.

    Usage::

        with RichUploadProgress(upload.filename) as progress:
            service.add(upload, progress_callback=progress)
    """

    def __init__(self, description: str = "Uploading") -> None:
        try:
            from rich.progress import (
                BarColumn,
                DownloadColumn,
                Progress,
                SpinnerColumn,
                TextColumn,
                TimeRemainingColumn,
                TransferSpeedColumn,
            )
        except ModuleNotFoundError as exc:
            raise MissingDependencyError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=get_rich_console(),
            transient=False,
        )
        self._description: str = escape(_shorten(description))
        self._task_id: Any = None
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> RichUploadProgress:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the Rich progress display."""
        if not self._started:
            self._progress.start()
            self._started = True

    def stop(self) -> None:
        """Stop the Rich progress display (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Callback
    # ------------------------------------------------------------------

    def __call__(self, sent: int, total: int) -> None:
        """Record that *sent* of *total* bytes have been handed off."""
        if not self._started:
            return
        if self._task_id is None:
            self._task_id = self._progress.add_task(self._description, total=total)
        self._progress.update(self._task_id, total=total, completed=min(sent, total))


def _shorten(name: str, width: int = 50) -> str:
    if len(name) > width:
        return name[: width - 3] + "..."
    return name
