"""Assetmart data models — all Pydantic v2, all frozen (immutable)."""

from assetmart.models.assets import AssetRecord, AssetRef
from assetmart.models.events import BoughtEvent, EventKind, MarketEvent, OfferedEvent
from assetmart.models.fees import FeePolicy, OverpaymentPolicy
from assetmart.models.listings import Listing, Receipt

__all__ = [
    # assets
    "AssetRef",
    "AssetRecord",
    # listings
    "Listing",
    "Receipt",
    # fees
    "FeePolicy",
    "OverpaymentPolicy",
    # events
    "EventKind",
    "MarketEvent",
    "OfferedEvent",
    "BoughtEvent",
]
