"""Rich terminal renderer for listings, events and balances.

Color scheme
------------
- green  : sold listings, ``Bought`` events
- yellow : open listings, ``Offered`` events
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from assetmart.core.units import DEFAULT_DECIMALS, format_units
from assetmart.models.events import BoughtEvent, EventKind, MarketEvent
from assetmart.models.listings import Listing, Receipt

_EVENT_STYLES: dict[EventKind, str] = {
    EventKind.OFFERED: "yellow",
    EventKind.BOUGHT: "green",
}


class MarketRenderer:
    """Renders marketplace state as Rich tables.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    decimals:
        Display precision of the monetary unit.
    """

    def __init__(
        self, console: Console | None = None, decimals: int = DEFAULT_DECIMALS
    ) -> None:
        self.console = console or Console()
        self.decimals = decimals

    def _amount(self, value: int) -> str:
        return format_units(value, self.decimals)

    # ------------------------------------------------------------------
    # Renderables
    # ------------------------------------------------------------------

    def render_listings(self, listings: Sequence[Listing]) -> Table:
        table = Table(title="Listings", header_style="bold cyan")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Asset")
        table.add_column("Seller")
        table.add_column("Price", justify="right")
        table.add_column("State", justify="center")

        for item in listings:
            state = "[green]SOLD[/green]" if item.sold else "[yellow]OPEN[/yellow]"
            table.add_row(
                str(item.listing_id),
                str(item.asset),
                item.seller,
                self._amount(item.price),
                state,
            )
        return table

    def render_events(self, events: Sequence[MarketEvent]) -> Table:
        table = Table(title="Events", header_style="bold cyan")
        table.add_column("Seq", style="dim", justify="right")
        table.add_column("Kind")
        table.add_column("Item", justify="right")
        table.add_column("Price", justify="right")
        table.add_column("Seller")
        table.add_column("Buyer")
        table.add_column("Hash", style="dim")

        for event in events:
            style = _EVENT_STYLES.get(event.kind, "")
            buyer = event.buyer if isinstance(event, BoughtEvent) else "[dim]-[/dim]"
            table.add_row(
                str(event.sequence),
                f"[{style}]{event.kind.value}[/{style}]",
                str(event.listing_id),
                self._amount(event.price),
                event.seller,
                buyer,
                event.event_hash[:12],
            )
        return table

    def render_balances(self, balances: Mapping[str, int]) -> Table:
        table = Table(title="Balances", header_style="bold cyan")
        table.add_column("Account")
        table.add_column("Balance", justify="right")
        for account, amount in balances.items():
            table.add_row(account, self._amount(amount))
        return table

    def render_receipt(self, receipt: Receipt) -> Panel:
        lines = [
            f"[bold]Item:[/bold]     {receipt.listing_id} ({receipt.asset})",
            f"[bold]Seller:[/bold]   {receipt.seller}",
            f"[bold]Buyer:[/bold]    {receipt.buyer}",
            f"[bold]Price:[/bold]    {self._amount(receipt.price)}",
            f"[bold]Fee:[/bold]      {self._amount(receipt.fee)}",
            f"[bold]Total:[/bold]    {self._amount(receipt.total)}",
        ]
        if receipt.refunded:
            lines.append(f"[bold]Refunded:[/bold] {self._amount(receipt.refunded)}")
        return Panel(
            "\n".join(lines),
            title="[bold]Receipt[/bold]",
            border_style="green",
            padding=(1, 2),
        )

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_listings(self, listings: Sequence[Listing]) -> None:
        self.console.print(self.render_listings(listings))

    def print_events(self, events: Sequence[MarketEvent]) -> None:
        self.console.print(self.render_events(events))

    def print_balances(self, balances: Mapping[str, int]) -> None:
        self.console.print(self.render_balances(balances))

    def print_receipt(self, receipt: Receipt) -> None:
        self.console.print(self.render_receipt(receipt))

    def print_chain_verification(self, valid: bool) -> None:
        """Print an event-chain verification result."""
        if valid:
            self.console.print("[green]Event hash chain is valid.[/green]")
        else:
            self.console.print("[bold red]Event hash chain is BROKEN![/bold red]")
