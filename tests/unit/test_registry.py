"""Tests for the reference AssetRegistry — mint, approval, transfer."""

from __future__ import annotations

import pytest

from assetmart.core.errors import AuthorizationError, NotFoundError, ValidationError
from assetmart.core.registry import AssetRegistry, RegistryLike

URI = "sample URI"


class TestDeployment:
    def test_name_and_symbol(self):
        reg = AssetRegistry()
        assert reg.name == "DApp NFT"
        assert reg.symbol == "DAPP"

    def test_address_generated(self):
        assert AssetRegistry().address.startswith("reg-")
        assert AssetRegistry().address != AssetRegistry().address

    def test_satisfies_protocol(self):
        assert isinstance(AssetRegistry(), RegistryLike)


class TestMinting:
    def test_tracks_each_minted_asset(self, registry: AssetRegistry):
        assert registry.mint("addr1", URI) == 1
        assert registry.token_count == 1
        assert registry.balance_of("addr1") == 1
        assert registry.token_uri(1) == URI

        assert registry.mint("addr2", URI) == 2
        assert registry.token_count == 2
        assert registry.balance_of("addr2") == 1
        assert registry.token_uri(2) == URI
        assert registry.owner_of(2) == "addr2"

    def test_empty_owner_rejected(self, registry: AssetRegistry):
        with pytest.raises(ValidationError):
            registry.mint("", URI)
        assert registry.token_count == 0

    def test_unminted_lookups(self, registry: AssetRegistry):
        with pytest.raises(NotFoundError):
            registry.owner_of(1)
        with pytest.raises(NotFoundError):
            registry.token_uri(0)


class TestTransfer:
    def test_owner_can_transfer(self, registry: AssetRegistry):
        registry.mint("addr1", URI)
        registry.transfer_ownership(1, "addr1", "addr2", operator="addr1")
        assert registry.owner_of(1) == "addr2"
        assert registry.token_uri(1) == URI

    def test_unapproved_operator_rejected(self, registry: AssetRegistry):
        registry.mint("addr1", URI)
        with pytest.raises(AuthorizationError):
            registry.transfer_ownership(1, "addr1", "addr2", operator="mkt")
        assert registry.owner_of(1) == "addr1"

    def test_approved_operator_allowed(self, registry: AssetRegistry):
        registry.mint("addr1", URI)
        registry.set_approval_for_all("addr1", "mkt", True)
        assert registry.is_approved_for_all("addr1", "mkt")
        registry.transfer_ownership(1, "addr1", "mkt", operator="mkt")
        assert registry.owner_of(1) == "mkt"

    def test_revoked_operator_rejected(self, registry: AssetRegistry):
        registry.mint("addr1", URI)
        registry.set_approval_for_all("addr1", "mkt", True)
        registry.set_approval_for_all("addr1", "mkt", False)
        with pytest.raises(AuthorizationError):
            registry.transfer_ownership(1, "addr1", "mkt", operator="mkt")

    def test_wrong_from_rejected(self, registry: AssetRegistry):
        registry.mint("addr1", URI)
        with pytest.raises(AuthorizationError):
            registry.transfer_ownership(1, "addr2", "addr3", operator="addr2")

    def test_self_approval_rejected(self, registry: AssetRegistry):
        with pytest.raises(ValidationError):
            registry.set_approval_for_all("addr1", "addr1", True)
