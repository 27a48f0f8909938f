"""Asset identity and registry-side asset records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AssetRef(BaseModel):
    """Composite key of a tradable asset: the registry address plus its id."""

    model_config = ConfigDict(frozen=True)

    registry: str
    asset_id: int = Field(gt=0)

    def __str__(self) -> str:
        return f"{self.registry}#{self.asset_id}"


class AssetRecord(BaseModel):
    """Registry-side state of one minted asset.

    ``metadata_uri`` is fixed at mint time.  Ownership changes produce a new
    record via ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    asset_id: int = Field(gt=0)
    owner: str
    metadata_uri: str
