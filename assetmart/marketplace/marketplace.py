"""Marketplace — escrowed listings and atomic purchases.

The marketplace owns every piece of shared state (listing store and counter,
funds, event sink, fee policy) for its whole lifetime and hands them to the
Settlement Engine by reference.  All public operations are serialized by a
single re-entrant lock, so a multi-threaded host sees the same totally
ordered, all-or-nothing behavior as a sequential one.
"""

from __future__ import annotations

import threading
import uuid
from collections import deque
from typing import TYPE_CHECKING

from assetmart.core.event_sink import EventHandler, EventSink
from assetmart.core.funds import FundsLedger
from assetmart.core.listing_store import ListingStore
from assetmart.core.registry import RegistryLike
from assetmart.core.settlement import SettlementEngine
from assetmart.models.events import EventKind, MarketEvent
from assetmart.models.fees import FeePolicy, OverpaymentPolicy
from assetmart.models.listings import Listing, Receipt

if TYPE_CHECKING:
    from assetmart.config import MarketConfig


class Marketplace:
    """Fixed-price marketplace with escrow and a percentage platform fee.

    Parameters
    ----------
    fee_account:
        Account credited with the platform fee on every sale.
    fee_percent:
        Non-negative integer percentage of the price charged on top of it.
    funds:
        Balance book to settle against.  A fresh one is created if omitted.
    overpayment_policy:
        Handling of payments above the quoted total.
    address:
        Identity of the marketplace (escrow holder).  Generated if omitted.

    Examples
    --------
    >>> from assetmart.core.registry import AssetRegistry
    >>> reg = AssetRegistry()
    >>> mp = Marketplace(fee_account="deployer", fee_percent=1)
    >>> asset_id = reg.mint("alice", "ipfs://meta/1")
    >>> reg.set_approval_for_all("alice", mp.address, True)
    >>> mp.list_item(reg, asset_id, "alice", 200).listing_id
    1
    >>> mp.get_total_price(1)
    202
    """

    def __init__(
        self,
        fee_account: str,
        fee_percent: int,
        funds: FundsLedger | None = None,
        overpayment_policy: OverpaymentPolicy = OverpaymentPolicy.REFUND,
        address: str | None = None,
    ) -> None:
        self._address = address or f"mkt-{uuid.uuid4().hex[:12]}"
        self._fee_policy = FeePolicy(fee_account=fee_account, fee_percent=fee_percent)
        self._store = ListingStore()
        self._funds = funds if funds is not None else FundsLedger()
        self._sink = EventSink()
        self._engine = SettlementEngine(
            store=self._store,
            funds=self._funds,
            sink=self._sink,
            fee_policy=self._fee_policy,
            escrow_account=self._address,
            overpayment_policy=overpayment_policy,
        )
        self._lock = threading.RLock()
        # Committed events awaiting subscriber delivery, in sequence order.
        self._pending: deque[MarketEvent] = deque()
        self._delivery_lock = threading.RLock()
        self._delivering = False

    @classmethod
    def from_config(
        cls, cfg: MarketConfig, funds: FundsLedger | None = None
    ) -> Marketplace:
        """Build a marketplace from ``MarketConfig`` settings."""
        return cls(
            fee_account=cfg.fee_account,
            fee_percent=cfg.fee_percent,
            funds=funds,
            overpayment_policy=cfg.overpayment_policy,
        )

    # -- Identity & fee policy ----------------------------------------------

    @property
    def address(self) -> str:
        return self._address

    @property
    def fee_account(self) -> str:
        return self._fee_policy.fee_account

    @property
    def fee_percent(self) -> int:
        return self._fee_policy.fee_percent

    @property
    def overpayment_policy(self) -> OverpaymentPolicy:
        return self._engine.overpayment_policy

    # -- Operations ---------------------------------------------------------

    def list_item(
        self, registry: RegistryLike, asset_id: int, seller: str, price: int
    ) -> Listing:
        """Escrow an asset and offer it at *price* (base units).

        The seller must own the asset and have approved this marketplace as
        an operator on *registry*.  Emits ``Offered`` on success.
        """
        with self._lock:
            outcome = self._engine.list_asset(registry, asset_id, seller, price)
            self._pending.append(outcome.event)
        self._deliver()
        return outcome.listing

    def purchase_item(self, listing_id: int, paid: int, buyer: str) -> Receipt:
        """Buy a listing, paying at least ``get_total_price(listing_id)``.

        Emits ``Bought`` on success.  On any failure nothing changes.
        """
        with self._lock:
            outcome = self._engine.purchase(listing_id, paid, buyer)
            self._pending.append(outcome.event)
        self._deliver()
        return outcome.receipt

    def _deliver(self) -> None:
        """Hand committed events to subscribers strictly in sequence order.

        Handlers run outside the state lock, so a handler may call back into
        the marketplace; its own events are queued and delivered after the
        current one by the outer delivery loop.
        """
        with self._delivery_lock:
            if self._delivering:
                return
            self._delivering = True
            try:
                while True:
                    with self._lock:
                        if not self._pending:
                            return
                        event = self._pending.popleft()
                    self._sink.notify([event])
            finally:
                self._delivering = False

    # -- Queries ------------------------------------------------------------

    def item_count(self) -> int:
        with self._lock:
            return self._store.item_count

    def items(self, listing_id: int) -> Listing:
        with self._lock:
            return self._store.get(listing_id)

    def all_items(self) -> list[Listing]:
        with self._lock:
            return self._store.all()

    def get_total_price(self, listing_id: int) -> int:
        """Price plus market fee for a listing, in base units."""
        with self._lock:
            return self._engine.quote_total(listing_id)

    # -- Funds --------------------------------------------------------------

    def deposit(self, account: str, amount: int) -> int:
        """Credit host-provided funds to *account*; return the new balance."""
        with self._lock:
            return self._funds.deposit(account, amount)

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._funds.balance_of(account)

    # -- Events -------------------------------------------------------------

    def subscribe(self, handler: EventHandler) -> None:
        self._sink.subscribe(handler)

    def events(self, kind: EventKind | None = None) -> list[MarketEvent]:
        with self._lock:
            if kind is None:
                return self._sink.events()
            return self._sink.of_kind(kind)

    def verify_events(self) -> bool:
        with self._lock:
            return self._sink.verify_chain()

    def export_anchor(self) -> dict:
        with self._lock:
            return self._sink.export_anchor()
