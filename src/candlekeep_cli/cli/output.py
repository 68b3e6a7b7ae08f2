"""Rendering of service results for humans and for ``--json``.

Data goes to stdout, status lines (``✓``, ``!``, ``i``) go to stderr so
that ``ck items get ID > doc.md`` and ``ck --json ... | jq`` stay clean.

All display-related logic lives here — no API calls, no parsing.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable
from typing import Any, TypeVar

from candlekeep_cli.cli.console import console, escape, out, write_stdout
from candlekeep_cli.core.models import TocEntry
from candlekeep_cli.core.records import (
    AccessSession,
    Account,
    ContentUpdate,
    DeleteResult,
    EnrichedItem,
    FlaggedItem,
    ItemListing,
    MarkdownDocument,
    ReadResult,
    SourceListing,
    TocResult,
    UploadReceipt,
)
from candlekeep_cli.exceptions import MissingDependencyError

T = TypeVar("T")

_STATUS_STYLES: dict[str, str] = {
    "READY": "green",
    "DRAFT": "yellow",
    "PROCESSING": "cyan",
    "FAILED": "red",
}


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for listing output."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "rich is not installed. Install with: pip install rich "
            "(or use --json for plain output)",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Status lines (stderr)
# ---------------------------------------------------------------------------

def success(message: str) -> None:
    console.print(f"[bold green]✓[/bold green] {message}")


def warning(message: str) -> None:
    console.print(f"[bold yellow]![/bold yellow] {message}")


def info(message: str) -> None:
    console.print(f"[bold cyan]i[/bold cyan] {message}")


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def to_jsonable(data: Any) -> Any:
    """Convert record dataclasses (possibly nested) into JSON-ready values."""
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    return data


def emit_json(data: Any) -> None:
    write_stdout(json.dumps(to_jsonable(data), indent=2, ensure_ascii=False) + "\n")


def emit(result: T, *, json_output: bool, render: Callable[[T], None]) -> None:
    """Print *result* as JSON or through its human renderer."""
    if json_output:
        emit_json(result)
    else:
        render(result)


# ---------------------------------------------------------------------------
# Presentation helpers (pure, no I/O)
# ---------------------------------------------------------------------------

def format_status(status: str) -> str:
    """Wrap *status* in its Rich colour, if it has one."""
    style = _STATUS_STYLES.get(status.upper())
    if style is None:
        return escape(status)
    return f"[{style}]{escape(status)}[/{style}]"


def enrichment_marker(needs_enrichment: bool, confidence: float | None) -> str:
    """``⚠`` when flagged, ``✓`` when enriched, ``-`` otherwise."""
    if needs_enrichment:
        return "[yellow]⚠[/yellow]"
    if confidence is not None:
        return "[green]✓[/green]"
    return "[dim]-[/dim]"


def truncate(text: str | None, width: int) -> str:
    """Shorten *text* to *width* characters with a trailing ``...``."""
    if not text:
        return "-"
    single_line = " ".join(text.split())
    if len(single_line) <= width:
        return single_line
    return single_line[: width - 3] + "..."


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def toc_lines(entries: tuple[TocEntry, ...]) -> list[str]:
    """Indent each entry by its level: ``"  Chapter 1 (p. 3)"``."""
    return [f"{'  ' * entry.level}{entry.title} (p. {entry.page})" for entry in entries]


def _rule(char: str = "─", width: int = 60) -> str:
    return char * width


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

def render_account(account: Account) -> None:
    table = _import_rich_table()(show_header=False, border_style="dim")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Email", escape(account.email))
    if account.name:
        table.add_row("Name", escape(account.name))
    table.add_row("Tier", escape(account.tier))
    table.add_row("Items", f"{account.item_count} / {account.item_limit}")
    table.add_row("User ID", escape(account.id))
    out.print(table)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

def render_item_listing(listing: ItemListing) -> None:
    if not listing.items:
        out.print("[dim]No items found.[/dim]")
        return

    table = _import_rich_table()(
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Pages", justify="right")
    table.add_column("Status")
    table.add_column("Enrich", justify="center")

    for item in listing.items:
        table.add_row(
            escape(item.id),
            escape(item.title),
            str(item.page_count),
            format_status(item.display_status),
            enrichment_marker(item.needs_enrichment, item.enrichment_confidence),
        )

    out.print(table)
    out.print(f"\n[bold]{plural(len(listing.items), 'item')}[/bold]")

    if listing.enrichment_queue:
        out.print("\n[bold yellow]Enrichment Queue:[/bold yellow]")
        for queued in listing.enrichment_queue:
            out.print(
                f"  [yellow]⚠[/yellow] [dim]{escape(queued.title)}[/dim] "
                f"({queued.page_count} pages)"
            )


def render_read_result(result: ReadResult) -> None:
    """Print page content raw, framed by plain-text separators.

    Page bodies are markdown and are written verbatim so that both a
    terminal and an agent reading the output see the original text.
    """
    for item in result.items:
        write_stdout(
            f"\n{_rule()}\n{item.title}\nID: {item.id} | {item.page_count} pages\n{_rule()}\n"
        )
        if not item.pages:
            write_stdout("No pages available.\n")
            continue
        for page in item.pages:
            write_stdout(f"\n── Page {page.page_num} ──\n\n")
            write_stdout((page.content if page.content is not None else "(No content)") + "\n")

    if result.not_found:
        warning(f"Items not found: {escape(', '.join(result.not_found))}")


def render_toc_result(result: TocResult) -> None:
    for item in result.items:
        out.print(f"\n[dim]{_rule('=')}[/dim] [bold cyan]{escape(item.title)}[/bold cyan]")
        out.print(f"[dim]ID: {escape(item.id)}[/dim] | {item.page_count} pages")
        if not item.toc:
            out.print("[yellow]No table of contents available.[/yellow]")
            continue
        for line in toc_lines(item.toc):
            out.print(escape(line))

    if result.not_found:
        warning(f"Items not found: {escape(', '.join(result.not_found))}")


def render_delete_result(result: DeleteResult, *, noun: str = "item") -> None:
    if result.deleted:
        success(
            f"Deleted {len(result.deleted)} {noun}(s): {escape(', '.join(result.deleted))}"
        )
    if result.not_found:
        warning(f"Not found: {escape(', '.join(result.not_found))}")
    if result.storage_errors:
        warning(f"Storage cleanup failed for: {escape(', '.join(result.storage_errors))}")


def render_upload_receipt(receipt: UploadReceipt) -> None:
    success(f"Added: {escape(receipt.title)} (ID: [cyan]{escape(receipt.item_id)}[/cyan])")
    info(f"Processing job created: {escape(receipt.job_id)} ({escape(receipt.job_status)})")


def render_enriched_item(item: EnrichedItem) -> None:
    success(f"Enriched: {escape(item.title)} (ID: [cyan]{escape(item.id)}[/cyan])")
    if item.author:
        info(f"Author: {escape(item.author)}")
    if item.description:
        info(f"Description: {escape(truncate(item.description, 80))}")
    if item.toc_entries:
        info(f"TOC: {item.toc_entries} entries added")
    if item.enrichment_confidence is not None:
        info(f"Confidence: {item.enrichment_confidence * 100:.1f}%")
    if item.needs_enrichment:
        warning("Still flagged for enrichment (confidence < 80%)")


def render_flagged_item(item: FlaggedItem) -> None:
    success(f"Flagged for enrichment: {escape(item.title)} (ID: [cyan]{escape(item.id)}[/cyan])")


def render_markdown_document(document: MarkdownDocument) -> None:
    success(f"Created: {escape(document.title)} (ID: [cyan]{escape(document.id)}[/cyan])")
    out.print(f"  Pages: {document.page_count}")
    out.print()
    out.print(f"  To add content: ck items put {escape(document.id)} --file content.md")
    out.print(f"  To view:        ck items get {escape(document.id)}")


def render_content_update(update: ContentUpdate) -> None:
    success(f"Updated: {escape(update.title)} (ID: [cyan]{escape(update.id)}[/cyan])")
    out.print(f"  Version: {update.version}")
    out.print(f"  Pages: {update.page_count}")


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def render_source_listing(listing: SourceListing) -> None:
    if not listing.sources:
        out.print("[dim]No sources found.[/dim]")
        return

    table = _import_rich_table()(
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("ID", no_wrap=True)
    table.add_column("Author")
    table.add_column("Content")
    table.add_column("URL")
    table.add_column("Date", no_wrap=True)

    for source in listing.sources:
        table.add_row(
            escape(source.id),
            escape(source.author),
            escape(truncate(source.content, 50)),
            escape(source.source_url or "-"),
            escape(source.created_at[:10] or "-"),
        )

    out.print(table)
    out.print(
        f"\n[bold]{plural(listing.total, 'source')}[/bold] "
        f"(showing {len(listing.sources)})"
    )


# ---------------------------------------------------------------------------
# Access sessions
# ---------------------------------------------------------------------------

def render_session_started(session: AccessSession) -> None:
    out.print(f"Session started: {escape(session.session_id)}")


def render_session_completed(session: AccessSession) -> None:
    out.print(f"Session completed: {escape(session.session_id)}")
