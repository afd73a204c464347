"""CLI entry point."""

from __future__ import annotations

import sys


def main() -> None:
    """Main entry point for the CLI."""
    import importlib.util

    if importlib.util.find_spec("rich_click") is None:
        print("CLI dependencies not installed. Run: pip install moodrelay[cli]")
        sys.exit(1)

    _run_cli()


def _run_cli() -> None:
    """Configure rich-click styling and run the command group."""
    import rich_click as click

    # Command docstrings use markdown (bold, indented examples); analyze takes MESSAGE
    click.rich_click.USE_MARKDOWN = True
    click.rich_click.SHOW_ARGUMENTS = True
    click.rich_click.MAX_WIDTH = 100

    from moodrelay.cli.commands import cli

    cli()


if __name__ == "__main__":
    main()
