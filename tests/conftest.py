"""Shared test fixtures for Assetmart."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from assetmart.core.registry import AssetRegistry
from assetmart.core.units import to_base_units
from assetmart.marketplace.marketplace import Marketplace
from assetmart.models.listings import Listing

URI = "sample URI"
FEE_PERCENT = 1


@pytest.fixture
def registry() -> AssetRegistry:
    """Provide a fresh reference registry."""
    return AssetRegistry()


@pytest.fixture
def market() -> Marketplace:
    """Provide a marketplace charging 1% to the deployer account."""
    return Marketplace(fee_account="deployer", fee_percent=FEE_PERCENT)


@pytest.fixture
def make_listing(
    registry: AssetRegistry, market: Marketplace
) -> Callable[..., Listing]:
    """Factory fixture: mint, approve and list an asset for *seller*."""

    def _factory(seller: str = "addr1", price: int | None = None) -> Listing:
        asset_id = registry.mint(seller, URI)
        registry.set_approval_for_all(seller, market.address, True)
        return market.list_item(
            registry, asset_id, seller, price if price is not None else to_base_units(2)
        )

    return _factory


@pytest.fixture
def funded_buyer(market: Marketplace) -> str:
    """A buyer account holding 100 display units."""
    market.deposit("addr2", to_base_units(100))
    return "addr2"
