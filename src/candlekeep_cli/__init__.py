"""candlekeep-cli — command-line client for the CandleKeep document library.

Built on ``requests`` with a strict layered architecture: a pure
validation core, an HTTP infrastructure layer, and a Rich CLI.
"""

from candlekeep_cli.version import __version__

__all__: list[str] = ["__version__"]
