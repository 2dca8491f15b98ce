"""
Main entry point for the onedrive-fetch application.
This module handles top-level setup, exception handling, and CLI invocation.
"""

import asyncio
import logging
import sys

import typer
from rich.console import Console

from onedrive_fetch.cli.app import app
from onedrive_fetch.cli.formatters import format_error_with_suggestions
from onedrive_fetch.exceptions import OneDriveFetchError


def main() -> None:
    """Main entry point function."""
    log = logging.getLogger("onedrive_fetch")
    console = Console()

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(130)
    except OneDriveFetchError as e:
        console.print()
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print()
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
