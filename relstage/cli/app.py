"""Main Typer application — imports and registers all CLI commands.

Entry point: ``relstage`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from relstage.cli.commands.inspect_cmd import inspect_cmd
from relstage.cli.commands.unpack import unpack_cmd
from relstage.config import UnpackSettings

app = typer.Typer(
    name="relstage",
    help="relstage: fetch, verify and unpack staged software releases.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to RELSTAGE_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Configure logging for every command."""
    level = (log_level or UnpackSettings().log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="unpack", help="Fetch, verify and unpack a staged release.")(unpack_cmd)
app.command(name="inspect", help="List the artifacts of a staged release.")(inspect_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
