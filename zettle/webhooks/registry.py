"""Ordered webhook handler registry.

Handlers are consulted in registration order and the first one whose
``accepts`` returns true handles the payload; later handlers never see it.
"""

from __future__ import annotations

import logging
from typing import Any

from zettle.exceptions import UnhandledWebhookError
from zettle.webhooks.handlers import WebhookHandler
from zettle.webhooks.payload import Payload

logger = logging.getLogger(__name__)


class WebhookHandlerRegistry:
    """First-match dispatcher over an ordered list of handlers.

    Unhandled payloads are logged and dispatch returns None; with
    ``strict=True`` they raise UnhandledWebhookError instead.
    """

    def __init__(self, handlers: list[WebhookHandler] | None = None, strict: bool = False):
        self._handlers: list[WebhookHandler] = []
        self.strict = strict
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: WebhookHandler) -> None:
        """Append a handler; it runs only if every earlier handler declines."""
        if not isinstance(handler, WebhookHandler):
            raise TypeError(f"{handler!r} does not implement accepts()/handle()")
        self._handlers.append(handler)

    @property
    def handlers(self) -> list[WebhookHandler]:
        return list(self._handlers)

    def find(self, payload: Payload) -> WebhookHandler | None:
        """Return the first handler that accepts the payload."""
        for handler in self._handlers:
            if handler.accepts(payload):
                return handler
        return None

    def dispatch(self, payload: Payload) -> Any:
        handler = self.find(payload)
        if handler is None:
            if self.strict:
                raise UnhandledWebhookError(payload.event_name, payload.message_uuid)
            logger.info(
                "No handler for webhook %s (%s), dropping",
                payload.event_name,
                payload.message_uuid,
            )
            return None

        logger.info(
            "Dispatching webhook %s (%s) to %s",
            payload.event_name,
            payload.message_uuid,
            type(handler).__name__,
        )
        return handler.handle(payload)
