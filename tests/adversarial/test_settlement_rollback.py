"""Adversarial tests: settlement is all-or-nothing.

A failure at any step of a purchase or listing must leave balances,
ownership, listing state and the event log exactly as they were.
"""

from __future__ import annotations

import pytest

from assetmart.core.errors import AuthorizationError, ValidationError
from assetmart.core.registry import AssetRegistry
from assetmart.core.units import to_base_units
from assetmart.marketplace.marketplace import Marketplace
from assetmart.models.events import EventKind


class RefusingRegistry(AssetRegistry):
    """Registry that refuses any transfer to a blocked recipient."""

    def __init__(self, blocked: set[str]) -> None:
        super().__init__()
        self.blocked = blocked

    def transfer_ownership(self, asset_id, from_, to, operator):
        if to in self.blocked:
            raise AuthorizationError(f"transfers to '{to}' are frozen")
        super().transfer_ownership(asset_id, from_, to, operator)


def _state(market: Marketplace, registry: AssetRegistry) -> dict:
    accounts = ("addr1", "addr2", "deployer", market.address)
    return {
        "balances": {a: market.balance_of(a) for a in accounts},
        "owner": registry.owner_of(1),
        "sold": market.items(1).sold,
        "events": [e.event_hash for e in market.events()],
        "count": market.item_count(),
    }


@pytest.fixture
def setup():
    registry = RefusingRegistry(blocked={"addr2"})
    market = Marketplace(fee_account="deployer", fee_percent=1)
    registry.mint("addr1", "sample URI")
    registry.set_approval_for_all("addr1", market.address, True)
    market.list_item(registry, 1, "addr1", to_base_units(2))
    market.deposit("addr2", to_base_units(10))
    market.deposit("addr3", to_base_units(10))
    return market, registry


class TestPurchaseRollback:
    def test_registry_rejection_reverts_funds(self, setup):
        market, registry = setup
        before = _state(market, registry)

        with pytest.raises(AuthorizationError, match="frozen"):
            market.purchase_item(1, market.get_total_price(1), "addr2")

        assert _state(market, registry) == before
        assert market.events(EventKind.BOUGHT) == []
        assert market.verify_events() is True

    def test_listing_still_purchasable_after_rollback(self, setup):
        market, registry = setup
        total = market.get_total_price(1)
        with pytest.raises(AuthorizationError):
            market.purchase_item(1, total, "addr2")

        market.purchase_item(1, total, "addr3")
        assert registry.owner_of(1) == "addr3"
        assert market.balance_of("addr1") == to_base_units(2)

    def test_event_failure_reverts_everything(self, setup, monkeypatch):
        market, registry = setup
        before = _state(market, registry)

        def _broken_emit(event):
            raise OSError("event store unavailable")

        monkeypatch.setattr(market._sink, "emit", _broken_emit)
        with pytest.raises(OSError):
            market.purchase_item(1, market.get_total_price(1), "addr3")
        monkeypatch.undo()

        assert registry.owner_of(1) == market.address
        assert market.balance_of("addr3") == to_base_units(10)
        assert _state(market, registry) == before


class TestListingRollback:
    def test_event_failure_returns_asset_to_seller(self, monkeypatch):
        registry = AssetRegistry()
        market = Marketplace(fee_account="deployer", fee_percent=1)
        registry.mint("addr1", "sample URI")
        registry.set_approval_for_all("addr1", market.address, True)

        def _broken_emit(event):
            raise OSError("event store unavailable")

        monkeypatch.setattr(market._sink, "emit", _broken_emit)
        with pytest.raises(OSError):
            market.list_item(registry, 1, "addr1", 100)
        monkeypatch.undo()

        assert registry.owner_of(1) == "addr1"
        assert market.item_count() == 0
        assert market.events() == []

        listing = market.list_item(registry, 1, "addr1", 100)
        assert listing.listing_id == 1


class TestSharedRegistryAddress:
    def test_second_registry_with_same_address_rejected(self):
        first = AssetRegistry(address="reg-shared")
        second = AssetRegistry(address="reg-shared")
        market = Marketplace(fee_account="deployer", fee_percent=1)
        for reg in (first, second):
            reg.mint("addr1", "sample URI")
            reg.set_approval_for_all("addr1", market.address, True)

        market.list_item(first, 1, "addr1", 100)
        with pytest.raises(ValidationError, match="already bound"):
            market.list_item(second, 1, "addr1", 100)

        assert second.owner_of(1) == "addr1"
        assert market.item_count() == 1

        market.deposit("carol", 101)
        market.purchase_item(1, 101, "carol")
        assert first.owner_of(1) == "carol"
        assert second.owner_of(1) == "addr1"

    def test_same_registry_object_can_list_again(self):
        registry = AssetRegistry(address="reg-shared")
        market = Marketplace(fee_account="deployer", fee_percent=1)
        for _ in range(2):
            asset_id = registry.mint("addr1", "sample URI")
            registry.set_approval_for_all("addr1", market.address, True)
            market.list_item(registry, asset_id, "addr1", 100)
        assert market.item_count() == 2
