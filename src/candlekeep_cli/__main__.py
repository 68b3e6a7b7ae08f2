"""``python -m candlekeep_cli`` runs the same entry point as ``ck``."""

from __future__ import annotations

from candlekeep_cli.cli.app import cli

if __name__ == "__main__":
    cli()
