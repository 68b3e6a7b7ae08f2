"""Process exit codes returned by ``ck``.

Scripts and agents driving ``ck`` branch on these, so they are part of
the command-line contract.  argparse usage errors exit with 2 on their
own, which coincides with :data:`UNEXPECTED_ERROR`.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command finished; also used when access-session tracking fails."""

GENERAL_ERROR: int = 1
"""A CandleKeepError was reported as ``Error:`` (and ``Hint:``)."""

KEYBOARD_INTERRUPT: int = 130
"""Ctrl+C at a prompt or during a request (128 + SIGINT)."""

UNEXPECTED_ERROR: int = 2
"""A bug: some other exception reached :func:`candlekeep_cli.cli.app.cli`."""
