"""``ck items`` — list, read, toc, add, remove, enrich, flag, create, get, put.

Handlers parse nothing themselves: selectors, ID lists, and enrichment
flags are validated by the core services, which raise typed errors
before any request is sent.
"""

from __future__ import annotations

import argparse
import sys

from candlekeep_cli.cli import exit_codes, output
from candlekeep_cli.cli.console import console, escape, write_stdout
from candlekeep_cli.cli.context import CommandContext
from candlekeep_cli.cli.progress import RichUploadProgress
from candlekeep_cli.cli.prompts import confirm_deletion
from candlekeep_cli.core.enrichment import TOC_EXAMPLE, parse_enrichment
from candlekeep_cli.core.library_service import LibraryService, validate_item_id
from candlekeep_cli.core.selector import parse_id_list
from candlekeep_cli.infra.local_files import inspect_upload, read_text_input


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def handle_list(_args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.open_client() as api:
        listing = LibraryService(api).list_items()
    output.emit(listing, json_output=ctx.json_output, render=output.render_item_listing)
    return exit_codes.SUCCESS


def handle_read(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.open_client() as api:
        result = LibraryService(api).read(args.selector)
    output.emit(result, json_output=ctx.json_output, render=output.render_read_result)
    return exit_codes.SUCCESS


def handle_toc(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.open_client() as api:
        result = LibraryService(api).toc(args.ids)
    output.emit(result, json_output=ctx.json_output, render=output.render_toc_result)
    return exit_codes.SUCCESS


def handle_get(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Write a document's raw content to stdout for piping."""
    with ctx.open_client() as api:
        document = LibraryService(api).get_content(args.id)
    if ctx.json_output:
        output.emit_json(document)
    else:
        write_stdout(document.content)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def handle_add(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Upload a PDF or Markdown file with a progress bar."""
    upload = inspect_upload(args.file)

    with ctx.open_client() as api:
        service = LibraryService(api)
        if ctx.json_output:
            receipt = service.add(upload)
        else:
            console.print(f"[cyan]Uploading: {escape(upload.filename)}[/cyan]")
            console.print(f"[dim]Size: {upload.size} bytes[/dim]")
            with RichUploadProgress(upload.filename) as progress:
                receipt = service.add(upload, progress_callback=progress)

    output.emit(receipt, json_output=ctx.json_output, render=output.render_upload_receipt)
    return exit_codes.SUCCESS


def handle_remove(args: argparse.Namespace, ctx: CommandContext) -> int:
    ids = parse_id_list(args.ids, unique=True)

    if not args.yes and not confirm_deletion(ids, noun="item"):
        console.print("[dim]Cancelled.[/dim]")
        return exit_codes.SUCCESS

    with ctx.open_client() as api:
        result = LibraryService(api).remove(ids)
    output.emit(result, json_output=ctx.json_output, render=output.render_delete_result)
    return exit_codes.SUCCESS


def handle_enrich(args: argparse.Namespace, ctx: CommandContext) -> int:
    # Flag errors are reported even when no API key is configured.
    item_id = validate_item_id(args.id)
    request = parse_enrichment(
        title=args.title,
        author=args.author,
        description=args.description,
        toc=args.toc,
        confidence=args.confidence,
    )
    with ctx.open_client() as api:
        item = LibraryService(api).send_enrichment(item_id, request)
    output.emit(item, json_output=ctx.json_output, render=output.render_enriched_item)
    return exit_codes.SUCCESS


def handle_flag(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.open_client() as api:
        item = LibraryService(api).flag(args.id)
    output.emit(item, json_output=ctx.json_output, render=output.render_flagged_item)
    return exit_codes.SUCCESS


def handle_create(args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.open_client() as api:
        document = LibraryService(api).create_markdown(
            args.title,
            description=args.description,
            content=args.content,
        )
    output.emit(document, json_output=ctx.json_output, render=output.render_markdown_document)
    return exit_codes.SUCCESS


def handle_put(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Replace a document's content from ``--file`` or stdin."""
    content = read_text_input(args.file, sys.stdin)
    with ctx.open_client() as api:
        update = LibraryService(api).put_content(args.id, content)
    output.emit(update, json_output=ctx.json_output, render=output.render_content_update)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def add_parser(
    subparsers: argparse._SubParsersAction,
    common: argparse.ArgumentParser,
) -> None:
    parser = subparsers.add_parser(
        "items",
        parents=[common],
        help="Item management commands.",
        description="Item management commands.",
    )
    parser.set_defaults(help_parser=parser)
    commands = parser.add_subparsers(title="commands", metavar="COMMAND")

    list_parser = commands.add_parser("list", parents=[common], help="List all items in your library.")
    list_parser.set_defaults(handler=handle_list)

    read = commands.add_parser(
        "read",
        parents=[common],
        help="Read pages from items.",
        description=(
            "Read pages from items.  Every ID needs a page range: "
            "'id1:1-5,id2:all'."
        ),
    )
    read.add_argument("selector", help="Item IDs with page ranges, e.g. 'id1:1-5,id2:all'.")
    read.set_defaults(handler=handle_read)

    toc = commands.add_parser("toc", parents=[common], help="Show table of contents for items.")
    toc.add_argument("ids", help="Comma-separated item IDs.")
    toc.set_defaults(handler=handle_toc)

    add = commands.add_parser("add", parents=[common], help="Upload a PDF or Markdown file.")
    add.add_argument("file", help="Path to a .pdf, .md or .markdown file.")
    add.set_defaults(handler=handle_add)

    remove = commands.add_parser("remove", parents=[common], help="Remove items from your library.")
    remove.add_argument("ids", help="Comma-separated item IDs.")
    remove.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompt.")
    remove.set_defaults(handler=handle_remove)

    enrich = commands.add_parser(
        "enrich",
        parents=[common],
        help="Enrich item metadata (title, author, description, table of contents).",
    )
    enrich.add_argument("id", help="Item ID.")
    enrich.add_argument("--title", default=None, help="New title.")
    enrich.add_argument("--author", default=None, help="Author name.")
    enrich.add_argument("--description", default=None, help="Description.")
    enrich.add_argument(
        "--confidence",
        type=float,
        default=None,
        help="Confidence score (0.0-1.0).",
    )
    enrich.add_argument(
        "--toc",
        default=None,
        help=f"Table of contents as a JSON array: {TOC_EXAMPLE}",
    )
    enrich.set_defaults(handler=handle_enrich)

    flag = commands.add_parser("flag", parents=[common], help="Flag item as needing metadata enrichment.")
    flag.add_argument("id", help="Item ID.")
    flag.set_defaults(handler=handle_flag)

    create = commands.add_parser("create", parents=[common], help="Create a new markdown document.")
    create.add_argument("title", help="Document title.")
    create.add_argument("-d", "--description", default=None, help="Description.")
    create.add_argument("-c", "--content", default=None, help="Initial content.")
    create.set_defaults(handler=handle_create)

    get = commands.add_parser(
        "get",
        parents=[common],
        help="Print the full content of a document to stdout.",
    )
    get.add_argument("id", help="Item ID.")
    get.set_defaults(handler=handle_get)

    put = commands.add_parser(
        "put",
        parents=[common],
        help="Replace document content (from file or stdin).",
    )
    put.add_argument("id", help="Item ID.")
    put.add_argument("-f", "--file", default=None, help="Read content from this file instead of stdin.")
    put.set_defaults(handler=handle_put)
