"""``ck access`` — research-session tracking (hidden, used by agents).

Tracking must never block research: every failure here, including a
missing login, is reported as a warning and the command still exits
with :data:`exit_codes.SUCCESS`.
"""

from __future__ import annotations

import argparse

from candlekeep_cli.cli import exit_codes, output
from candlekeep_cli.cli.console import console, escape
from candlekeep_cli.cli.context import CommandContext
from candlekeep_cli.core.session_service import AccessSessionService
from candlekeep_cli.exceptions import CandleKeepError
from candlekeep_cli.utils.logging import get_logger

log = get_logger(__name__)


def _report_failure(ctx: CommandContext, summary: str, error: str) -> int:
    if ctx.json_output:
        output.emit_json({"error": error})
    else:
        console.print(f"[yellow]Warning:[/yellow] {escape(summary)}")
        console.print(f"  {escape(error)}")
    return exit_codes.SUCCESS


def handle_start(args: argparse.Namespace, ctx: CommandContext) -> int:
    try:
        with ctx.open_client() as api:
            session = AccessSessionService(api, ctx.session_store).start(args.intent)
    except CandleKeepError as exc:
        log.debug("access_start_failed", error=str(exc))
        return _report_failure(
            ctx,
            "Failed to start session (continuing without tracking).",
            str(exc),
        )

    output.emit(session, json_output=ctx.json_output, render=output.render_session_started)
    return exit_codes.SUCCESS


def handle_complete(_args: argparse.Namespace, ctx: CommandContext) -> int:
    """Complete the ``--session`` id, else the stored one."""
    target = ctx.session_flag.strip() if ctx.session_flag else None
    target = target or ctx.session_store.read()
    if not target:
        if ctx.json_output:
            output.emit_json({"error": "No active session"})
        else:
            console.print("No active session found.")
        return exit_codes.SUCCESS

    try:
        with ctx.open_client() as api:
            session = AccessSessionService(api, ctx.session_store).complete(target)
    except CandleKeepError as exc:
        log.debug("access_complete_failed", error=str(exc))
        return _report_failure(ctx, "Failed to complete session.", str(exc))

    if session is not None:
        output.emit(session, json_output=ctx.json_output, render=output.render_session_completed)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def add_parser(
    subparsers: argparse._SubParsersAction,
    common: argparse.ArgumentParser,
) -> None:
    # No ``help=``: keeps the group out of the top-level command list.
    parser = subparsers.add_parser(
        "access",
        parents=[common],
        description="Access session tracking.",
    )
    parser.set_defaults(help_parser=parser)
    commands = parser.add_subparsers(title="commands", metavar="COMMAND")

    start = commands.add_parser("start", parents=[common], help="Start a new research session.")
    start.add_argument("--intent", default=None, help="Research intent or question.")
    start.set_defaults(handler=handle_start)

    complete = commands.add_parser(
        "complete",
        parents=[common],
        help="Complete the current research session.",
    )
    complete.set_defaults(handler=handle_complete)
