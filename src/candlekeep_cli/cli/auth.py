"""``ck auth`` — login, logout, whoami."""

from __future__ import annotations

import argparse

from candlekeep_cli.cli import exit_codes, output
from candlekeep_cli.cli.console import console, escape
from candlekeep_cli.cli.context import CommandContext
from candlekeep_cli.cli.prompts import prompt_api_key
from candlekeep_cli.core.library_service import LibraryService


def handle_login(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Validate an API key against ``whoami`` and store it."""
    config = ctx.load_config()
    if config.is_authenticated:
        output.warning("Already logged in. Use 'ck auth logout' first to re-authenticate.")
        return exit_codes.SUCCESS

    api_key: str = args.key.strip() if args.key else prompt_api_key(config.api_url)

    console.print("[dim]Validating API key…[/dim]")
    with ctx.open_client(config, api_key=api_key, track=False) as api:
        account = LibraryService(api).whoami()

    ctx.config_store.save_api_key(api_key)

    if ctx.json_output:
        output.emit_json(account)
    else:
        output.success(
            f"Logged in as [cyan]{escape(account.email)}[/cyan] ({escape(account.tier)})"
        )
    return exit_codes.SUCCESS


def handle_logout(_args: argparse.Namespace, ctx: CommandContext) -> int:
    if not ctx.load_config().is_authenticated:
        output.warning("Not currently logged in.")
        return exit_codes.SUCCESS
    ctx.config_store.clear_credentials()
    output.success("Logged out successfully.")
    return exit_codes.SUCCESS


def handle_whoami(_args: argparse.Namespace, ctx: CommandContext) -> int:
    with ctx.open_client() as api:
        account = LibraryService(api).whoami()
    output.emit(account, json_output=ctx.json_output, render=output.render_account)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def add_parser(
    subparsers: argparse._SubParsersAction,
    common: argparse.ArgumentParser,
) -> None:
    parser = subparsers.add_parser(
        "auth",
        parents=[common],
        help="Authentication commands.",
        description="Authentication commands.",
    )
    parser.set_defaults(help_parser=parser)
    commands = parser.add_subparsers(title="commands", metavar="COMMAND")

    login = commands.add_parser(
        "login",
        parents=[common],
        help="Store an API key after validating it.",
        description="Store an API key after validating it.",
    )
    login.add_argument(
        "--key",
        default=None,
        help="API key to store (prompted for with hidden input when omitted).",
    )
    login.set_defaults(handler=handle_login)

    logout = commands.add_parser("logout", parents=[common], help="Remove stored credentials.")
    logout.set_defaults(handler=handle_logout)

    whoami = commands.add_parser("whoami", parents=[common], help="Show current user information.")
    whoami.set_defaults(handler=handle_whoami)
