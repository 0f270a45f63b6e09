"""Webhook handlers: one predicate/action pair per Zettle event.

A handler is anything with ``accepts(payload) -> bool`` and
``handle(payload)``. Handlers are stateless; integrators attach business
effects through callbacks.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, runtime_checkable

from zettle.webhooks.payload import Payload

logger = logging.getLogger(__name__)


@runtime_checkable
class WebhookHandler(Protocol):
    """Protocol for webhook handlers."""

    def accepts(self, payload: Payload) -> bool:
        """Whether this handler is responsible for the payload."""
        ...

    def handle(self, payload: Payload) -> Any:
        """Process the payload. The return value is passed back by dispatch."""
        ...


class EventHandler:
    """Handler for a single event name that delegates to a callable."""

    def __init__(self, event_name: str, callback: Callable[[Payload], Any]):
        self.event_name = event_name
        self._callback = callback

    def accepts(self, payload: Payload) -> bool:
        return payload.event_name == self.event_name

    def handle(self, payload: Payload) -> Any:
        return self._callback(payload)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.event_name!r})"


class InventoryTrackingStoppedHandler:
    """Reacts to Zettle turning off stock tracking for a product.

    Zettle does not say what the integration should do about it, so the
    handler reports the product UUID to ``on_stopped`` when given one and
    otherwise only logs it.
    """

    EVENT_NAME = "InventoryTrackingStopped"

    def __init__(self, on_stopped: Callable[[str], Any] | None = None):
        self._on_stopped = on_stopped

    def accepts(self, payload: Payload) -> bool:
        return payload.event_name == self.EVENT_NAME

    def handle(self, payload: Payload) -> str | None:
        product_uuid = payload.data.get("productUuid")
        if not product_uuid:
            logger.warning(
                "%s webhook %s carries no productUuid",
                self.EVENT_NAME,
                payload.message_uuid,
            )
            return None

        logger.info("Inventory tracking stopped for product %s", product_uuid)
        if self._on_stopped is not None:
            self._on_stopped(product_uuid)
        return product_uuid
