"""Listing Store — the single source of truth for listing existence and state.

Design:
- Ids are dense and start at 1; the counter only ever moves forward.
- Records are append-only; a sold listing stays retrievable.
- Only ``mark_sold`` mutates a record, and only its ``sold`` flag.
"""

from __future__ import annotations

from assetmart.core.errors import NotFoundError, ValidationError
from assetmart.models.assets import AssetRef
from assetmart.models.listings import Listing


class ListingStore:
    """Allocates and retrieves ``Listing`` records.

    Examples
    --------
    >>> store = ListingStore()
    >>> listing = store.create(AssetRef(registry="reg-1", asset_id=1), "alice", 5)
    >>> listing.listing_id, store.item_count
    (1, 1)
    """

    def __init__(self) -> None:
        self._items: dict[int, Listing] = {}
        self._counter = 0

    @property
    def item_count(self) -> int:
        """Number of listing ids allocated so far."""
        return self._counter

    @staticmethod
    def validate_price(price: int) -> None:
        """Raise ``ValidationError`` unless *price* is a positive integer."""
        if isinstance(price, bool) or not isinstance(price, int):
            raise ValidationError(
                f"Price must be an integer number of base units, got {price!r}"
            )
        if price <= 0:
            raise ValidationError("Price must be greater than zero")

    def create(self, asset: AssetRef, seller: str, price: int) -> Listing:
        """Allocate the next listing id and store an unsold listing."""
        self.validate_price(price)
        listing = Listing(
            listing_id=self._counter + 1,
            asset=asset,
            seller=seller,
            price=price,
        )
        self._counter = listing.listing_id
        self._items[listing.listing_id] = listing
        return listing

    def get(self, listing_id: int) -> Listing:
        """Return the listing for *listing_id*.

        Raises ``NotFoundError`` for 0, negative, or never-allocated ids.
        """
        if isinstance(listing_id, bool) or not isinstance(listing_id, int):
            raise NotFoundError("item doesn't exist")
        listing = self._items.get(listing_id)
        if listing is None:
            raise NotFoundError("item doesn't exist")
        return listing

    def mark_sold(self, listing_id: int) -> Listing:
        """Flip ``sold`` to True.  The caller has already checked it was unsold."""
        sold = self.get(listing_id).model_copy(update={"sold": True})
        self._items[listing_id] = sold
        return sold

    def all(self) -> list[Listing]:
        """Return every listing in id order."""
        return [self._items[i] for i in sorted(self._items)]

    # ------------------------------------------------------------------
    # Rollback support (settlement journal only)
    # ------------------------------------------------------------------

    def _restore(self, listing: Listing) -> None:
        """Put back a record captured before an aborted settlement."""
        self._items[listing.listing_id] = listing

    def _release(self, listing_id: int) -> None:
        """Drop the most recently allocated listing of an aborted listing call."""
        if listing_id != self._counter:
            raise RuntimeError(
                f"Can only release the latest listing ({self._counter}), "
                f"not {listing_id}"
            )
        del self._items[listing_id]
        self._counter -= 1
