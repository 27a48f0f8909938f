"""Account balances in integer base units.

The host environment owns real accounts; this ledger models the balances the
marketplace moves during settlement.  Amounts are always non-negative
integers, and no balance may go below zero.
"""

from __future__ import annotations

import logging

from assetmart.core.errors import PaymentError, ValidationError

logger = logging.getLogger(__name__)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(
            f"Amount must be an integer number of base units, got {amount!r}"
        )
    if amount < 0:
        raise ValidationError(f"Amount must not be negative, got {amount}")


class FundsLedger:
    """Balance book for every account the marketplace pays or charges.

    Examples
    --------
    >>> funds = FundsLedger()
    >>> funds.deposit("bob", 100)
    100
    >>> funds.transfer("bob", "alice", 40)
    >>> funds.balance_of("alice"), funds.balance_of("bob")
    (40, 60)
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    @property
    def total_supply(self) -> int:
        """Sum of all balances; constant across transfers."""
        return sum(self._balances.values())

    def deposit(self, account: str, amount: int) -> int:
        """Credit *account* with externally provided funds; return new balance."""
        _check_amount(amount)
        if not account:
            raise ValidationError("Account identity must not be empty")
        self._balances[account] = self.balance_of(account) + amount
        return self._balances[account]

    def transfer(self, src: str, dst: str, amount: int) -> None:
        """Move *amount* from *src* to *dst*.

        Raises ``PaymentError`` if *src* holds less than *amount*; nothing
        changes in that case.
        """
        _check_amount(amount)
        available = self.balance_of(src)
        if available < amount:
            raise PaymentError(
                f"insufficient funds: '{src}' holds {available}, needs {amount}"
            )
        if amount == 0:
            return
        self._balances[src] = available - amount
        self._balances[dst] = self.balance_of(dst) + amount
        logger.debug("Moved %d from '%s' to '%s'.", amount, src, dst)

    def snapshot(self) -> dict[str, int]:
        """Return a copy of every non-zero balance."""
        return {k: v for k, v in self._balances.items() if v}
