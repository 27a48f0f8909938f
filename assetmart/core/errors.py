"""Error taxonomy shared by the registry, the funds ledger and the marketplace.

Every kind is a distinct class so callers can branch on type rather than on
message text.  The ``reason`` attribute carries the stable, human-readable
explanation that is also used as the exception message.
"""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for every error raised by an aborted marketplace operation."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ValidationError(MarketplaceError, ValueError):
    """Raised for malformed input, e.g. a non-positive listing price."""


class NotFoundError(MarketplaceError, LookupError):
    """Raised for a listing id or asset id that was never allocated."""


class StateError(MarketplaceError, RuntimeError):
    """Raised when an operation targets a listing that is already sold."""


class PaymentError(MarketplaceError):
    """Raised when a payment does not cover the quoted total."""


class AuthorizationError(MarketplaceError, PermissionError):
    """Raised when the caller lacks ownership or transfer authority."""
