"""``ck doctor``: is this machine ready to talk to CandleKeep?

Checks the CLI and Python versions, the HTTP library, the config file,
the stored API key and the API URL in effect.  Everything is local;
the server is never contacted.  Only a FAIL row changes the exit code.
"""

from __future__ import annotations

import platform
import sys

from candlekeep_cli.cli import exit_codes
from candlekeep_cli.cli.console import console
from candlekeep_cli.exceptions import ConfigError
from candlekeep_cli.infra.config_store import API_URL_ENV, AppConfig, ConfigStore
from candlekeep_cli.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _cli_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the candlekeep-cli version row."""
    return "candlekeep-cli", __version__, "[green]OK[/green]"


def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _requests_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the requests row."""
    try:
        import requests
    except ImportError:
        return "requests", "NOT INSTALLED", "[red]FAIL[/red]"
    return "requests", getattr(requests, "__version__", "unknown"), "[green]OK[/green]"


def _config_check(store: ConfigStore) -> tuple[tuple[str, str, str], AppConfig | None]:
    """Return the config-file row and the loaded config, if readable."""
    try:
        config = store.load()
    except ConfigError as exc:
        return ("Config", str(exc), "[red]FAIL[/red]"), None
    if not store.path.exists():
        return ("Config", f"{store.path} (not created yet)", "[yellow]WARN[/yellow]"), config
    return ("Config", str(store.path), "[green]OK[/green]"), config


def _auth_check(config: AppConfig | None) -> tuple[str, str, str]:
    """Return (label, value, status) for the authentication row."""
    if config is None:
        return "Auth", "unknown", "[yellow]WARN[/yellow]"
    if config.is_authenticated:
        return "Auth", "API key stored", "[green]OK[/green]"
    return "Auth", "not logged in", "[yellow]WARN[/yellow]"


def _api_url_check(config: AppConfig | None) -> tuple[str, str, str]:
    """Return (label, value, status) for the API URL row."""
    if config is None:
        return "API URL", "unknown", "[yellow]WARN[/yellow]"
    return "API URL", config.api_url, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nck doctor", file=sys.stderr)
    print("=" * 72, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<46} {'Status':<8}", file=sys.stderr)
    print("-" * 72, file=sys.stderr)
    for label, value, status in checks:
        plain_status = _status_plain(status)
        print(f"{label:<16} {value:<46} {plain_status:<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(store: ConfigStore | None = None) -> int:
    """Print the diagnostics table (plain text without Rich) and any hints.

    Parameters
    ----------
    store:
        Config file to inspect; the default location when omitted.

    Returns
    -------
    int
        :data:`exit_codes.GENERAL_ERROR` if any row is FAIL, else
        :data:`exit_codes.SUCCESS` (WARN rows do not count).
    """
    store = store if store is not None else ConfigStore()
    config_row, config = _config_check(store)
    checks = [
        _cli_version_check(),
        _python_version_check(),
        _requests_version_check(),
        config_row,
        _auth_check(config),
        _api_url_check(config),
    ]

    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="ck doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    hints: list[str] = []
    if config is not None and not config.is_authenticated:
        hints.append("Run 'ck auth login' to store an API key.")
    if config is None:
        hints.append("Fix or delete the config file, then run 'ck auth login'.")
    if hints and rich_available:
        for hint in hints:
            console.print(f"[yellow]Hint:[/yellow] {hint}")
        console.print(f"[dim]Set {API_URL_ENV} to point at another server.[/dim]")
        console.print()
    elif hints:
        for hint in hints:
            print(f"Hint: {hint}", file=sys.stderr)
        print(file=sys.stderr)

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            print("Some checks failed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        print("All checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
