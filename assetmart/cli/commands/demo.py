"""``assetmart demo`` — run a complete trade with sample accounts.

Mints two assets, lists one through the marketplace, purchases it, and
shows listings, events and balances before verifying the event chain.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel

from assetmart.config import config
from assetmart.core.errors import MarketplaceError
from assetmart.core.registry import AssetRegistry
from assetmart.core.units import to_base_units
from assetmart.marketplace.marketplace import Marketplace
from assetmart.monitor.renderer import MarketRenderer

console = Console()


def demo_cmd(
    price: str = typer.Option(
        "2", "--price", "-p", help="Listing price in display units."
    ),
    budget: str = typer.Option(
        "10", "--budget", help="Starting balance of the buyer in display units."
    ),
    uri: str = typer.Option(
        "sample URI", "--uri", help="Metadata URI for the minted assets."
    ),
) -> None:
    """Run a demo trade between a seller and a buyer."""
    renderer = MarketRenderer(console=console, decimals=config.decimals)
    registry = AssetRegistry(name=config.registry_name, symbol=config.registry_symbol)
    market = Marketplace.from_config(config)
    seller, buyer = "seller", "buyer"

    console.print()
    console.print(
        Panel(
            "[bold]Assetmart Demo Trade[/bold]\n\n"
            f"Registry {registry.name} ({registry.symbol}) at {registry.address}\n"
            f"Marketplace {market.address}, fee {market.fee_percent}% "
            f"to '{market.fee_account}'",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    try:
        market.deposit(buyer, to_base_units(budget, config.decimals))
        asset_id = registry.mint(seller, uri)
        registry.mint(buyer, uri)
        registry.set_approval_for_all(seller, market.address, True)

        listing = market.list_item(
            registry, asset_id, seller, to_base_units(price, config.decimals)
        )
        renderer.print_listings(market.all_items())

        total = market.get_total_price(listing.listing_id)
        receipt = market.purchase_item(listing.listing_id, total, buyer)
    except MarketplaceError as exc:
        console.print(
            f"[bold red]{type(exc).__name__}:[/bold red] {exc.reason}"
        )
        raise typer.Exit(code=1)

    renderer.print_receipt(receipt)
    renderer.print_listings(market.all_items())
    renderer.print_events(market.events())
    renderer.print_balances(
        {
            account: market.balance_of(account)
            for account in (seller, buyer, market.fee_account, market.address)
        }
    )
    console.print(
        f"[bold]Owner of asset {asset_id}:[/bold] {registry.owner_of(asset_id)}"
    )
    renderer.print_chain_verification(market.verify_events())
