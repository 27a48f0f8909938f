"""Marketplace notifications (``Offered`` and ``Bought``).

Events are frozen Pydantic models.  The Event Sink seals each one with its
position in the log and a SHA-256 hash chained to the previous event, so an
external observer can reconcile settlement data and detect tampering.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """The two notification types emitted by the marketplace."""

    OFFERED = "offered"
    BOUGHT = "bought"


class MarketEvent(BaseModel):
    """Fields shared by every marketplace event."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    sequence: int = 0  # 1-based position, assigned by the sink
    previous_event_hash: str = ""
    event_hash: str = ""  # computed by the sink, seals this event

    listing_id: int
    registry: str
    asset_id: int
    price: int
    seller: str


class OfferedEvent(MarketEvent):
    """An asset was escrowed and listed for sale."""

    kind: EventKind = EventKind.OFFERED


class BoughtEvent(MarketEvent):
    """A listing was purchased and settled."""

    kind: EventKind = EventKind.BOUGHT
    buyer: str

