"""Append-only, hash-chained log of marketplace events.

Design:
- Append-only: ``emit()`` is the only public write; there is no update or
  delete.
- Strictly ordered: each event carries its 1-based ``sequence``.
- Hash-chained: each event includes the SHA-256 of the previous event, so
  ``verify_chain()`` detects any rewrite.
- Subscribers are notified by the marketplace only after the operation that
  produced the event has committed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from assetmart.core.hasher import canonical_json_bytes, compute_event_hash, sha256_hex
from assetmart.models.events import EventKind, MarketEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[MarketEvent], Any]


class EventIntegrityError(RuntimeError):
    """Raised when the event hash chain is broken."""


class EventSink:
    """Ordered record of ``Offered`` and ``Bought`` notifications."""

    def __init__(self) -> None:
        self._events: list[MarketEvent] = []
        self._handlers: list[EventHandler] = []

    def __len__(self) -> int:
        return len(self._events)

    # ------------------------------------------------------------------
    # Core: append-only write
    # ------------------------------------------------------------------

    def emit(self, event: MarketEvent) -> MarketEvent:
        """Seal *event* with its sequence and hash links, then append it.

        Returns the sealed event.
        """
        previous_hash = self._events[-1].event_hash if self._events else ""
        staged = event.model_copy(
            update={
                "sequence": len(self._events) + 1,
                "previous_event_hash": previous_hash,
                "event_hash": "",
            }
        )
        sealed = staged.model_copy(
            update={"event_hash": compute_event_hash(staged.model_dump(mode="json"))}
        )
        self._events.append(sealed)
        return sealed

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------

    def subscribe(self, handler: EventHandler) -> None:
        """Register a callable invoked with each committed event."""
        self._handlers.append(handler)

    def notify(self, events: list[MarketEvent]) -> None:
        """Deliver committed *events* to every subscriber, in order.

        A failing subscriber is logged; the committed operation stands.
        """
        for event in events:
            for handler in self._handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "Subscriber %r failed on %s event #%d.",
                        handler,
                        event.kind.value,
                        event.sequence,
                    )

    # ------------------------------------------------------------------
    # Queries (read-only)
    # ------------------------------------------------------------------

    def events(self) -> list[MarketEvent]:
        return list(self._events)

    def of_kind(self, kind: EventKind) -> list[MarketEvent]:
        return [e for e in self._events if e.kind == kind]

    def latest(self) -> MarketEvent | None:
        return self._events[-1] if self._events else None

    # ------------------------------------------------------------------
    # Chain verification
    # ------------------------------------------------------------------

    def verify_chain(self) -> bool:
        """Recompute every seal and link.

        Returns True if the chain is valid, raises EventIntegrityError otherwise.
        """
        prev_hash = ""
        for position, event in enumerate(self._events, start=1):
            if event.sequence != position:
                raise EventIntegrityError(
                    f"Sequence gap at event {event.event_id}: "
                    f"expected {position}, got {event.sequence}"
                )
            if event.previous_event_hash != prev_hash:
                raise EventIntegrityError(
                    f"Chain broken at event {event.event_id}: "
                    f"expected previous_hash={prev_hash!r}, "
                    f"got {event.previous_event_hash!r}"
                )
            expected_hash = compute_event_hash(event.model_dump(mode="json"))
            if event.event_hash != expected_hash:
                raise EventIntegrityError(
                    f"Tampered event {event.event_id}: "
                    f"expected hash={expected_hash!r}, got {event.event_hash!r}"
                )
            prev_hash = event.event_hash
        return True

    def export_anchor(self) -> dict[str, Any]:
        """Export the chain head for off-system reconciliation.

        Returns
        -------
        dict[str, Any]
            Keys: ``count``, ``root_hash`` (hash of the last event) and
            ``anchor_hash`` (SHA-256 of the other two).
        """
        payload: dict[str, Any] = {
            "count": len(self._events),
            "root_hash": self._events[-1].event_hash if self._events else "",
        }
        payload["anchor_hash"] = sha256_hex(canonical_json_bytes(payload))
        return payload

    # ------------------------------------------------------------------
    # Rollback support (settlement journal only)
    # ------------------------------------------------------------------

    def _discard(self, event: MarketEvent) -> None:
        """Remove the latest event of an aborted operation."""
        if not self._events or self._events[-1].event_id != event.event_id:
            raise EventIntegrityError(
                f"Can only discard the latest event, not {event.event_id}"
            )
        self._events.pop()
