"""Fee policy — the platform's cut of each sale."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FeePolicy(BaseModel):
    """Immutable ``(fee_account, fee_percent)`` pair applied at settlement.

    The fee is ``floor(price * fee_percent / 100)``, computed on integers so
    no rounding drift can creep in.

    Examples
    --------
    >>> policy = FeePolicy(fee_account="deployer", fee_percent=1)
    >>> policy.fee_for(200)
    2
    >>> policy.total_for(200)
    202
    >>> policy.fee_for(99)
    0
    """

    model_config = ConfigDict(frozen=True)

    fee_account: str = Field(min_length=1)
    fee_percent: int = Field(ge=0, strict=True)

    def fee_for(self, price: int) -> int:
        return price * self.fee_percent // 100

    def total_for(self, price: int) -> int:
        return price + self.fee_for(price)


class OverpaymentPolicy(str, Enum):
    """What settlement does with a payment above the quoted total."""

    REFUND = "refund"  # surplus returned to the buyer
    RETAIN = "retain"  # surplus stays in the marketplace account
    REJECT = "reject"  # only exact payment is accepted
