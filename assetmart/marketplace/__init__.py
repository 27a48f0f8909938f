"""Fixed-price asset marketplace with escrow and platform fees."""

from assetmart.marketplace.marketplace import Marketplace

__all__ = ["Marketplace"]
