"""Entry point for ``ck``: argument parsing, dispatch, error reporting.

Each command group module (``auth``, ``items``, ``sources``, ``access``)
registers its own subparsers and handlers; this module only wires them
together and turns a handler's return value into the exit status.

Errors are not caught in :func:`main`, so tests can assert on the
exception a command raises.  :func:`cli`, the console-script target,
is where they become ``Error:``/``Hint:`` lines and exit codes.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from candlekeep_cli.cli import access, auth, exit_codes, items, sources
from candlekeep_cli.cli.console import console, escape
from candlekeep_cli.cli.context import CommandContext
from candlekeep_cli.exceptions import CandleKeepError
from candlekeep_cli.utils.logging import configure_logging, get_logger
from candlekeep_cli.version import __version__

log = get_logger(__name__)

Handler = Callable[[argparse.Namespace, CommandContext], int]

VISIBLE_COMMANDS: tuple[str, ...] = ("auth", "items", "sources", "doctor")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _common_options() -> argparse.ArgumentParser:
    """Global flags, accepted both before and after a subcommand.

    Defaults are ``SUPPRESS`` so a subcommand parser never overwrites a
    value already set at the top level.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Output in JSON format.",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log HTTP requests and other debug detail to stderr.",
    )
    # Hidden and mutually exclusive; the conflict is checked in main()
    # because the two flags may be given at different command levels.
    common.add_argument(
        "--session",
        dest="session_flag",
        default=argparse.SUPPRESS,
        help=argparse.SUPPRESS,
    )
    common.add_argument(
        "--no-session",
        dest="no_session",
        action="store_true",
        default=argparse.SUPPRESS,
        help=argparse.SUPPRESS,
    )
    return common


def _handle_doctor(_args: argparse.Namespace, ctx: CommandContext) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from candlekeep_cli.cli.doctor import run_doctor

    return run_doctor(ctx.config_store)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``ck auth login|logout|whoami``
    * ``ck items list|read|toc|add|remove|enrich|flag|create|get|put``
    * ``ck sources list|delete``
    * ``ck access start|complete`` (hidden)
    * ``ck doctor``
    * ``ck --version``
    """
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="ck",
        description="CandleKeep CLI - Manage your document library.",
        parents=[common],
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.set_defaults(help_parser=parser)

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="{" + ",".join(VISIBLE_COMMANDS) + "}",
    )
    auth.add_parser(subparsers, common)
    items.add_parser(subparsers, common)
    sources.add_parser(subparsers, common)
    access.add_parser(subparsers, common)

    doctor = subparsers.add_parser(
        "doctor",
        parents=[common],
        help="Run environment diagnostics.",
    )
    doctor.set_defaults(handler=_handle_doctor)
    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Parse *argv* (``sys.argv[1:]`` when ``None``) and run the handler.

    Returns
    -------
    int
        Exit status; see :mod:`candlekeep_cli.cli.exit_codes`.

    Raises
    ------
    CandleKeepError
        Whatever the command raised; :func:`cli` reports it.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    session_flag: str | None = getattr(args, "session_flag", None)
    no_session: bool = getattr(args, "no_session", False)
    if session_flag is not None and no_session:
        parser.error("argument --no-session: not allowed with argument --session")

    configure_logging(verbose=getattr(args, "verbose", False))

    handler: Handler | None = getattr(args, "handler", None)
    if handler is None:
        args.help_parser.print_help()
        return exit_codes.SUCCESS

    ctx = CommandContext(
        json_output=getattr(args, "json_output", False),
        session_flag=session_flag,
        no_session=no_session,
    )
    log.debug("command_start", handler=handler.__qualname__, json=ctx.json_output)
    return handler(args, ctx)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Console-script target: run :func:`main` and map errors to exit codes.

    Known errors print ``Error:`` plus an optional ``Hint:`` on stderr;
    anything else is reported as a bug instead of a traceback.
    """
    try:
        code = main()
        sys.exit(code)
    except CandleKeepError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(exc)}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(exc)}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
