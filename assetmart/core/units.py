"""Monetary unit conversion.

All amounts inside the marketplace are integers in the smallest
denomination ("base units").  Display units are ``10 ** decimals`` base
units, mirroring the ether/wei split of the original deployment.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from assetmart.core.errors import ValidationError

DEFAULT_DECIMALS = 18

Number = int | str | Decimal


def to_base_units(value: Number, decimals: int = DEFAULT_DECIMALS) -> int:
    """Convert a display amount (``"2.02"``) to integer base units.

    Floats are refused: they cannot represent most decimal fractions exactly.
    Raises ``ValidationError`` if the value has more fractional digits than
    *decimals* allows.

    Examples
    --------
    >>> to_base_units("2.02")
    2020000000000000000
    >>> to_base_units(1, decimals=2)
    100
    """
    if isinstance(value, (bool, float)):
        raise ValidationError(
            f"Amount must be an int, str or Decimal, got {type(value).__name__}"
        )
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise ValidationError(f"Not a decimal amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Not a finite amount: {value!r}")

    scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValidationError(
            f"Amount {value} has more than {decimals} fractional digits"
        )
    return int(scaled)


def from_base_units(amount: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Convert integer base units back to an exact ``Decimal`` display amount."""
    return Decimal(amount).scaleb(-decimals)


def format_units(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render base units as a trimmed decimal string (``"2.02"``, ``"0"``)."""
    text = format(from_base_units(amount, decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
