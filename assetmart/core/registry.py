"""In-memory asset registry — mint, ownership, operator approval, metadata.

The marketplace treats the registry as an external collaborator and only
relies on the ``RegistryLike`` protocol below.  ``AssetRegistry`` is the
reference implementation used by the CLI demo and the test-suite.

Ownership rules:
- ``mint`` assigns dense ids starting at 1, owner = minter.
- ``metadata_uri`` is fixed at mint and never changes.
- ``transfer_ownership`` succeeds only if ``from_`` is the current owner and
  the ``operator`` is either ``from_`` itself or an operator ``from_`` has
  approved with ``set_approval_for_all``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Protocol, runtime_checkable

from assetmart.core.errors import AuthorizationError, NotFoundError, ValidationError
from assetmart.models.assets import AssetRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class RegistryLike(Protocol):
    """Capability set the marketplace needs from an asset registry."""

    @property
    def address(self) -> str: ...

    def owner_of(self, asset_id: int) -> str: ...

    def is_approved_for_all(self, owner: str, operator: str) -> bool: ...

    def transfer_ownership(
        self, asset_id: int, from_: str, to: str, operator: str
    ) -> None: ...


class AssetRegistry:
    """Reference registry of uniquely identified, transferable assets.

    Parameters
    ----------
    name:
        Collection name.
    symbol:
        Collection ticker symbol.
    address:
        Identity of the registry.  Generated (``reg-<hex>``) if omitted.

    Examples
    --------
    >>> reg = AssetRegistry()
    >>> reg.mint("alice", "ipfs://meta/1")
    1
    >>> reg.owner_of(1)
    'alice'
    >>> reg.token_count
    1
    """

    def __init__(
        self,
        name: str = "DApp NFT",
        symbol: str = "DAPP",
        address: str | None = None,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self._address = address or f"reg-{uuid.uuid4().hex[:12]}"
        self._assets: dict[int, AssetRecord] = {}
        self._operators: dict[str, set[str]] = {}
        self._token_count = 0

    @property
    def address(self) -> str:
        return self._address

    @property
    def token_count(self) -> int:
        """Total number of assets minted so far."""
        return self._token_count

    # -- Minting -------------------------------------------------------------

    def mint(self, owner: str, metadata_uri: str) -> int:
        """Mint a new asset owned by *owner* and return its id."""
        if not owner:
            raise ValidationError("Owner identity must not be empty")
        self._token_count += 1
        asset_id = self._token_count
        self._assets[asset_id] = AssetRecord(
            asset_id=asset_id, owner=owner, metadata_uri=metadata_uri
        )
        logger.info(
            "Minted asset %d on %s for '%s'.", asset_id, self._address, owner
        )
        return asset_id

    # -- Queries -------------------------------------------------------------

    def _record(self, asset_id: int) -> AssetRecord:
        record = self._assets.get(asset_id)
        if record is None:
            raise NotFoundError(f"asset {asset_id} doesn't exist")
        return record

    def owner_of(self, asset_id: int) -> str:
        return self._record(asset_id).owner

    def token_uri(self, asset_id: int) -> str:
        return self._record(asset_id).metadata_uri

    def balance_of(self, owner: str) -> int:
        """Number of assets currently owned by *owner*."""
        return sum(1 for record in self._assets.values() if record.owner == owner)

    # -- Approval ------------------------------------------------------------

    def set_approval_for_all(self, owner: str, operator: str, approved: bool) -> None:
        """Grant or revoke *operator*'s authority over all of *owner*'s assets."""
        if owner == operator:
            raise ValidationError("Cannot set approval for the owner itself")
        operators = self._operators.setdefault(owner, set())
        if approved:
            operators.add(operator)
        else:
            operators.discard(operator)
        logger.debug(
            "Operator '%s' %s for '%s'.",
            operator,
            "approved" if approved else "revoked",
            owner,
        )

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return operator in self._operators.get(owner, set())

    # -- Transfer ------------------------------------------------------------

    def transfer_ownership(
        self, asset_id: int, from_: str, to: str, operator: str
    ) -> None:
        """Move *asset_id* from *from_* to *to* on behalf of *operator*.

        Raises
        ------
        NotFoundError
            If the asset was never minted.
        AuthorizationError
            If *from_* is not the owner, or *operator* is neither the owner
            nor an approved operator of the owner.
        ValidationError
            If *to* is empty.
        """
        record = self._record(asset_id)
        if record.owner != from_:
            raise AuthorizationError(
                f"'{from_}' is not the owner of asset {asset_id}"
            )
        if operator != from_ and not self.is_approved_for_all(from_, operator):
            raise AuthorizationError(
                f"'{operator}' is not authorized to transfer asset {asset_id}"
            )
        if not to:
            raise ValidationError("Transfer recipient must not be empty")

        self._assets[asset_id] = record.model_copy(update={"owner": to})
        logger.debug("Asset %d moved '%s' -> '%s'.", asset_id, from_, to)
