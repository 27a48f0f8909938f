"""Adversarial tests: one listing can be sold exactly once, even under threads."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from assetmart.core.errors import MarketplaceError, StateError
from assetmart.core.registry import AssetRegistry
from assetmart.marketplace.marketplace import Marketplace


def _race(market: Marketplace, buyers: list[str], total: int) -> list[object]:
    def _attempt(buyer: str) -> object:
        try:
            return market.purchase_item(1, total, buyer)
        except MarketplaceError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(buyers)) as pool:
        return list(pool.map(_attempt, buyers))


class TestDoubleSpend:
    def test_concurrent_buyers_single_winner(self):
        registry = AssetRegistry()
        market = Marketplace(fee_account="deployer", fee_percent=5)
        registry.mint("seller", "uri")
        registry.set_approval_for_all("seller", market.address, True)
        market.list_item(registry, 1, "seller", 1000)
        total = market.get_total_price(1)

        buyers = [f"buyer-{i}" for i in range(16)]
        for buyer in buyers:
            market.deposit(buyer, total)

        results = _race(market, buyers, total)
        receipts = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]

        assert len(receipts) == 1
        assert all(isinstance(f, StateError) for f in failures)

        winner = receipts[0].buyer
        assert registry.owner_of(1) == winner
        assert market.balance_of("seller") == 1000
        assert market.balance_of("deployer") == 50
        for buyer in buyers:
            expected = 0 if buyer == winner else total
            assert market.balance_of(buyer) == expected
        assert len(market.events()) == 2

    def test_seller_cannot_relist_escrowed_asset(self):
        registry = AssetRegistry()
        market = Marketplace(fee_account="deployer", fee_percent=1)
        registry.mint("seller", "uri")
        registry.set_approval_for_all("seller", market.address, True)
        market.list_item(registry, 1, "seller", 10)

        try:
            market.list_item(registry, 1, "seller", 10)
        except MarketplaceError as exc:
            assert type(exc).__name__ == "AuthorizationError"
        else:
            raise AssertionError("relisting an escrowed asset must fail")
        assert market.item_count() == 1


class TestSubscriberOrdering:
    def test_concurrent_listings_delivered_in_sequence(self):
        registry = AssetRegistry()
        market = Marketplace(fee_account="deployer", fee_percent=1)
        asset_ids = [registry.mint("seller", "uri") for _ in range(400)]
        registry.set_approval_for_all("seller", market.address, True)

        seen: list[int] = []
        market.subscribe(lambda e: seen.append(e.sequence))

        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(
                lambda asset_id: market.list_item(registry, asset_id, "seller", 10),
                asset_ids,
            ))

        assert seen == list(range(1, 401))

    def test_reentrant_subscriber_keeps_order(self):
        registry = AssetRegistry()
        market = Marketplace(fee_account="deployer", fee_percent=1)
        registry.mint("seller", "uri")
        registry.mint("seller", "uri")
        registry.set_approval_for_all("seller", market.address, True)

        first: list[int] = []
        second: list[int] = []

        def _relist_once(event):
            first.append(event.sequence)
            if event.sequence == 1:
                market.list_item(registry, 2, "seller", 10)

        market.subscribe(_relist_once)
        market.subscribe(lambda e: second.append(e.sequence))
        market.list_item(registry, 1, "seller", 10)

        assert first == [1, 2]
        assert second == [1, 2]
