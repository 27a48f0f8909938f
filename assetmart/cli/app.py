"""Main Typer application — imports and registers all CLI commands.

Entry point: ``assetmart`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from assetmart.cli.commands.demo import demo_cmd
from assetmart.cli.commands.quote import quote_cmd
from assetmart.config import config

app = typer.Typer(
    name="assetmart",
    help="Assetmart: escrowed asset marketplace with atomic settlement.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Override ASSETMART_LOG_LEVEL for this run."
    ),
) -> None:
    """Configure logging once for every subcommand."""
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=config.debug, show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="demo", help="Mint, list and purchase an asset end to end.")(demo_cmd)
app.command(name="quote", help="Show price, fee and total for a price.")(quote_cmd)


@app.command(name="config", help="Show the effective configuration.")
def config_cmd() -> None:
    """Print every setting and its current value."""
    console = Console()
    table = Table(title="Assetmart Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.model_dump(mode="json").items():
        table.add_row(key, str(value))
    console.print(table)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
