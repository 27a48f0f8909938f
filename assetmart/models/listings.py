"""Listing and receipt models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from assetmart.models.assets import AssetRef


class Listing(BaseModel):
    """An offer to sell one escrowed asset at a fixed price.

    ``price`` is in base units.  Records are frozen: the Listing Store swaps
    in a copy with ``sold=True`` when a purchase settles, and nothing else
    about a listing ever changes.

    Examples
    --------
    >>> item = Listing(
    ...     listing_id=1,
    ...     asset=AssetRef(registry="reg-abc", asset_id=1),
    ...     seller="alice",
    ...     price=10,
    ... )
    >>> item.sold
    False
    """

    model_config = ConfigDict(frozen=True)

    listing_id: int = Field(gt=0)
    asset: AssetRef
    seller: str
    price: int = Field(gt=0)
    sold: bool = False

    @property
    def registry(self) -> str:
        return self.asset.registry

    @property
    def asset_id(self) -> int:
        return self.asset.asset_id


class Receipt(BaseModel):
    """Settlement record returned by a successful purchase."""

    model_config = ConfigDict(frozen=True)

    listing_id: int
    asset: AssetRef
    price: int
    fee: int
    total: int
    paid: int
    refunded: int = 0
    seller: str
    buyer: str
