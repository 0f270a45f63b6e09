"""Zettle webhook handling.

Inbound deliveries are signature-verified, deduplicated and dispatched to
the first registered handler that accepts them.
"""

from zettle.webhooks.handlers import (
    EventHandler,
    InventoryTrackingStoppedHandler,
    WebhookHandler,
)
from zettle.webhooks.payload import Payload
from zettle.webhooks.registry import WebhookHandlerRegistry

__all__ = [
    "EventHandler",
    "InventoryTrackingStoppedHandler",
    "Payload",
    "WebhookHandler",
    "WebhookHandlerRegistry",
]
