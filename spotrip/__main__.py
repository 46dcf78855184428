"""
Entry point for ``python -m spotrip`` and the ``spotrip`` console script.
"""

import asyncio
import logging
import sys

from rich.console import Console

from spotrip.cli.app import app
from spotrip.cli.formatters import format_error_with_suggestions
from spotrip.exceptions import SpotripError

log = logging.getLogger("spotrip")


def main() -> None:
    """Runs the CLI, turning errors that escape it into an exit code."""
    console = Console(stderr=True)
    try:
        app()
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(0)
    except SpotripError as e:
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
