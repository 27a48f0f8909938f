"""Assetmart: escrowed asset marketplace with atomic settlement.

Sellers escrow a registry asset with the marketplace and list it at a
price; buyers pay price plus a platform fee, and funds and ownership move
in a single all-or-nothing settlement.
"""

__version__ = "0.1.0"
__description__ = "Escrowed asset marketplace with atomic settlement"

from assetmart.core.registry import AssetRegistry
from assetmart.marketplace.marketplace import Marketplace

__all__ = ["AssetRegistry", "Marketplace", "__version__"]
