"""Interactive prompts for the CLI layer.

Wraps questionary for the two places the CLI asks the user something:
confirming a destructive delete and entering an API key.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from candlekeep_cli.cli.console import console, escape
from candlekeep_cli.exceptions import InputValidationError, MissingDependencyError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise MissingDependencyError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def confirm_deletion(ids: Sequence[str], *, noun: str) -> bool:
    """List what is about to be deleted and ask for a yes/no answer.

    Returns
    -------
    bool
        ``True`` only on an explicit yes; Esc / Ctrl+C answers count as no.
    """
    questionary = _import_questionary()

    console.print(f"[yellow]This will delete {len(ids)} {noun}(s):[/yellow]")
    for identifier in ids:
        console.print(f"  - {escape(identifier)}")
    console.print()

    answer: bool | None = questionary.confirm("Are you sure?", default=False).ask()
    return bool(answer)


def prompt_api_key(api_url: str) -> str:
    """Show where to create a key, then read it with hidden input.

    Raises
    ------
    InputValidationError
        If the user submits nothing or cancels the prompt.
    """
    questionary = _import_questionary()

    console.print("\nTo authenticate:")
    console.print(f"1. Go to [underline]{escape(api_url)}[/underline] and log in")
    console.print("2. Navigate to Settings > API Keys")
    console.print("3. Create a new API key and copy it")
    console.print()

    api_key: str | None = questionary.password("Enter your API key:").ask()
    if api_key is None or not api_key.strip():
        raise InputValidationError(
            "No API key provided.",
            hint="Pass --key KEY or paste the key at the prompt.",
        )
    return api_key.strip()
