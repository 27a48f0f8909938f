"""``assetmart quote`` — price + fee breakdown for a display-unit price."""

from __future__ import annotations

import typer
from rich.console import Console

from assetmart.config import config
from assetmart.core.errors import MarketplaceError
from assetmart.core.listing_store import ListingStore
from assetmart.core.units import format_units, to_base_units
from assetmart.models.fees import FeePolicy

console = Console()


def quote_cmd(
    price: str = typer.Argument(..., help="Listing price in display units, e.g. 2.5"),
    fee_percent: int = typer.Option(
        None, "--fee-percent", "-f", help="Fee percent (defaults to config)."
    ),
) -> None:
    """Print the fee and total a buyer would pay for *price*."""
    percent = config.fee_percent if fee_percent is None else fee_percent
    try:
        base_price = to_base_units(price, config.decimals)
        ListingStore.validate_price(base_price)
    except MarketplaceError as exc:
        console.print(f"[bold red]Invalid price:[/bold red] {exc.reason}")
        raise typer.Exit(code=1)

    if percent < 0:
        console.print("[bold red]Fee percent must not be negative.[/bold red]")
        raise typer.Exit(code=1)

    policy = FeePolicy(fee_account=config.fee_account, fee_percent=percent)
    fee = policy.fee_for(base_price)
    console.print(f"[bold]Price:[/bold] {format_units(base_price, config.decimals)}")
    console.print(
        f"[bold]Fee:[/bold]   {format_units(fee, config.decimals)} ({percent}%)"
    )
    console.print(
        f"[bold]Total:[/bold] "
        f"{format_units(policy.total_for(base_price), config.decimals)}"
    )
