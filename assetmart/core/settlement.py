"""Settlement Engine — escrowed listing and all-or-nothing purchase.

Every multi-step operation runs inside a ``UnitOfWork``.  Each completed
step records a compensating action; if any later step raises, the
compensations run in reverse order and the original exception propagates.
Callers therefore observe either the fully applied operation or no change
at all, and no event is left in the sink for a failed operation.

Purchase order of effects:
1. buyer pays ``paid`` into the marketplace escrow account
2. escrow pays ``price`` to the seller
3. escrow pays ``fee`` to the fee account
4. surplus is refunded or retained per ``OverpaymentPolicy``
5. the registry moves the asset from escrow to the buyer
6. the listing is marked sold
7. ``Bought`` is appended to the event sink
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType

from pydantic import BaseModel, ConfigDict

from assetmart.core.errors import (
    AuthorizationError,
    NotFoundError,
    PaymentError,
    StateError,
    ValidationError,
)
from assetmart.core.event_sink import EventSink
from assetmart.core.funds import FundsLedger
from assetmart.core.listing_store import ListingStore
from assetmart.core.registry import RegistryLike
from assetmart.models.assets import AssetRef
from assetmart.models.events import BoughtEvent, MarketEvent, OfferedEvent
from assetmart.models.fees import FeePolicy, OverpaymentPolicy
from assetmart.models.listings import Listing, Receipt

logger = logging.getLogger(__name__)


class SettlementOutcome(BaseModel):
    """Result of a committed operation: the affected listing and its event."""

    model_config = ConfigDict(frozen=True)

    listing: Listing
    event: MarketEvent
    receipt: Receipt | None = None


class UnitOfWork:
    """Journal of compensating actions for one atomic operation.

    Used as a context manager.  On a clean exit the journal is dropped; on
    an exception every recorded compensation runs, latest first, and the
    exception is re-raised.
    """

    def __init__(self, label: str) -> None:
        self.label = label
        self._compensations: list[Callable[[], None]] = []

    def record(self, compensation: Callable[[], None]) -> None:
        self._compensations.append(compensation)

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc_type is None:
            self._compensations.clear()
            return False
        logger.warning(
            "Rolling back %s (%d step(s)) after %s: %s",
            self.label,
            len(self._compensations),
            exc_type.__name__,
            exc,
        )
        while self._compensations:
            compensation = self._compensations.pop()
            try:
                compensation()
            except Exception:
                logger.exception(
                    "Compensation %r failed while rolling back %s.",
                    compensation,
                    self.label,
                )
        return False


class SettlementEngine:
    """Runs the listing and purchase protocols against shared state.

    Parameters
    ----------
    store:
        The Listing Store owned by the marketplace.
    funds:
        Balance book for buyers, sellers, the fee account and escrow.
    sink:
        Event Sink receiving ``Offered`` / ``Bought``.
    fee_policy:
        Immutable fee configuration.
    escrow_account:
        Identity of the marketplace itself; holds escrowed assets and
        in-flight payments.
    overpayment_policy:
        Handling of payments above the quoted total.
    """

    def __init__(
        self,
        store: ListingStore,
        funds: FundsLedger,
        sink: EventSink,
        fee_policy: FeePolicy,
        escrow_account: str,
        overpayment_policy: OverpaymentPolicy = OverpaymentPolicy.REFUND,
    ) -> None:
        self._store = store
        self._funds = funds
        self._sink = sink
        self._fee_policy = fee_policy
        self._escrow = escrow_account
        self._overpayment_policy = overpayment_policy
        self._registries: dict[str, RegistryLike] = {}

    @property
    def fee_policy(self) -> FeePolicy:
        return self._fee_policy

    @property
    def overpayment_policy(self) -> OverpaymentPolicy:
        return self._overpayment_policy

    # -- Quoting ------------------------------------------------------------

    def quote_total(self, listing_id: int) -> int:
        """Return ``price + fee`` for a listing, in base units."""
        listing = self._store.get(listing_id)
        total = self._fee_policy.total_for(listing.price)
        logger.debug("Quoted listing %d at %d.", listing_id, total)
        return total

    # -- Listing ------------------------------------------------------------

    def list_asset(
        self,
        registry: RegistryLike,
        asset_id: int,
        seller: str,
        price: int,
    ) -> SettlementOutcome:
        """Escrow *asset_id* from *seller* and create a listing at *price*.

        Raises
        ------
        ValidationError
            If *price* is not a positive integer, or another registry
            object already uses this registry's address.
        NotFoundError
            If the asset was never minted.
        AuthorizationError
            If *seller* is not the owner or has not approved the marketplace.
        """
        ListingStore.validate_price(price)

        known = self._registries.get(registry.address)
        if known is not None and known is not registry:
            raise ValidationError(
                f"registry address {registry.address} is already bound to "
                f"another registry"
            )

        if registry.owner_of(asset_id) != seller:
            raise AuthorizationError(
                f"'{seller}' is not the owner of asset {asset_id}"
            )
        if not registry.is_approved_for_all(seller, self._escrow):
            raise AuthorizationError(
                f"'{seller}' has not approved the marketplace to transfer "
                f"asset {asset_id}"
            )

        asset = AssetRef(registry=registry.address, asset_id=asset_id)
        with UnitOfWork(f"listing of {asset}") as uow:
            registry.transfer_ownership(
                asset_id, seller, self._escrow, operator=self._escrow
            )
            uow.record(
                lambda: registry.transfer_ownership(
                    asset_id, self._escrow, seller, operator=self._escrow
                )
            )

            listing = self._store.create(asset, seller, price)
            uow.record(lambda: self._store._release(listing.listing_id))

            event = self._sink.emit(
                OfferedEvent(
                    listing_id=listing.listing_id,
                    registry=asset.registry,
                    asset_id=asset_id,
                    price=price,
                    seller=seller,
                )
            )
            uow.record(lambda: self._sink._discard(event))

        self._registries[asset.registry] = registry
        logger.info(
            "Listed %s as item %d at %d for '%s'.",
            asset,
            listing.listing_id,
            price,
            seller,
        )
        return SettlementOutcome(listing=listing, event=event)

    # -- Purchase -----------------------------------------------------------

    def _check_payment(self, paid: int, total: int) -> None:
        if isinstance(paid, bool) or not isinstance(paid, int) or paid < 0:
            raise PaymentError(f"invalid payment amount {paid!r}")
        if paid < total:
            raise PaymentError(
                f"insufficient funds: not enough to cover item price and "
                f"market fee (paid {paid}, total {total})"
            )
        if self._overpayment_policy is OverpaymentPolicy.REJECT and paid != total:
            raise PaymentError(
                f"overpayment rejected: paid {paid}, total {total}"
            )

    def purchase(self, listing_id: int, paid: int, buyer: str) -> SettlementOutcome:
        """Settle a purchase of *listing_id* by *buyer* paying *paid*.

        Raises
        ------
        NotFoundError
            If the listing id was never allocated.
        StateError
            If the listing is already sold.
        PaymentError
            If *paid* is below the quoted total, or the buyer's balance
            cannot cover *paid*.
        AuthorizationError
            If the registry refuses the escrow-to-buyer transfer.
        """
        listing = self._store.get(listing_id)
        if listing.sold:
            raise StateError("item already sold")

        price = listing.price
        fee = self._fee_policy.fee_for(price)
        total = price + fee
        self._check_payment(paid, total)

        registry = self._registries.get(listing.registry)
        if registry is None:
            raise NotFoundError(f"registry {listing.registry} is not known")

        seller = listing.seller
        fee_account = self._fee_policy.fee_account
        surplus = paid - total
        refunded = 0

        with UnitOfWork(f"purchase of item {listing_id}") as uow:
            self._funds.transfer(buyer, self._escrow, paid)
            uow.record(lambda: self._funds.transfer(self._escrow, buyer, paid))

            self._funds.transfer(self._escrow, seller, price)
            uow.record(lambda: self._funds.transfer(seller, self._escrow, price))

            if fee:
                self._funds.transfer(self._escrow, fee_account, fee)
                uow.record(
                    lambda: self._funds.transfer(fee_account, self._escrow, fee)
                )

            if surplus and self._overpayment_policy is OverpaymentPolicy.REFUND:
                self._funds.transfer(self._escrow, buyer, surplus)
                uow.record(
                    lambda: self._funds.transfer(buyer, self._escrow, surplus)
                )
                refunded = surplus

            registry.transfer_ownership(
                listing.asset_id, self._escrow, buyer, operator=self._escrow
            )
            uow.record(
                lambda: registry.transfer_ownership(
                    listing.asset_id, buyer, self._escrow, operator=buyer
                )
            )

            sold = self._store.mark_sold(listing_id)
            uow.record(lambda: self._store._restore(listing))

            event = self._sink.emit(
                BoughtEvent(
                    listing_id=listing_id,
                    registry=listing.registry,
                    asset_id=listing.asset_id,
                    price=price,
                    seller=seller,
                    buyer=buyer,
                )
            )
            uow.record(lambda: self._sink._discard(event))

        receipt = Receipt(
            listing_id=listing_id,
            asset=listing.asset,
            price=price,
            fee=fee,
            total=total,
            paid=paid,
            refunded=refunded,
            seller=seller,
            buyer=buyer,
        )
        logger.info(
            "Item %d sold to '%s' for %d (fee %d, refunded %d).",
            listing_id,
            buyer,
            price,
            fee,
            refunded,
        )
        return SettlementOutcome(listing=sold, event=event, receipt=receipt)
