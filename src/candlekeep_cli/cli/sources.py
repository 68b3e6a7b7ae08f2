"""``ck sources`` — list and delete saved content sources."""

from __future__ import annotations

import argparse

from candlekeep_cli.cli import exit_codes, output
from candlekeep_cli.cli.console import console
from candlekeep_cli.cli.context import CommandContext
from candlekeep_cli.cli.prompts import confirm_deletion
from candlekeep_cli.core.selector import parse_id_list
from candlekeep_cli.core.source_service import DEFAULT_LIMIT, SourceService


def handle_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.open_client() as api:
        listing = SourceService(api).list(limit=args.limit)
    output.emit(listing, json_output=ctx.json_output, render=output.render_source_listing)
    return exit_codes.SUCCESS


def handle_delete(args: argparse.Namespace, ctx: CommandContext) -> int:
    ids = parse_id_list(args.ids, unique=True)

    if not args.yes and not confirm_deletion(ids, noun="source"):
        console.print("[dim]Cancelled.[/dim]")
        return exit_codes.SUCCESS

    with ctx.open_client() as api:
        result = SourceService(api).delete(ids)

    if ctx.json_output:
        output.emit_json(result)
    else:
        output.render_delete_result(result, noun="source")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def add_parser(
    subparsers: argparse._SubParsersAction,
    common: argparse.ArgumentParser,
) -> None:
    parser = subparsers.add_parser(
        "sources",
        parents=[common],
        help="Source management commands.",
        description="Source management commands.",
    )
    parser.set_defaults(help_parser=parser)
    commands = parser.add_subparsers(title="commands", metavar="COMMAND")

    list_parser = commands.add_parser("list", parents=[common], help="List saved sources.")
    list_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help=f"Maximum number of sources to return (default {DEFAULT_LIMIT}).",
    )
    list_parser.set_defaults(handler=handle_list)

    delete = commands.add_parser("delete", parents=[common], help="Delete sources.")
    delete.add_argument("ids", help="Comma-separated source IDs.")
    delete.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompt.")
    delete.set_defaults(handler=handle_delete)
