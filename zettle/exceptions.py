"""Error kinds raised by the Zettle SDK.

Everything surfaces to the immediate caller. Nothing is retried here
(the transport owns retries) and nothing is suppressed.
"""

from __future__ import annotations

from typing import Any


class ZettleError(Exception):
    """Base class for all SDK errors."""


class ZettleRestException(ZettleError):
    """A remote call did not yield a usable result.

    Raised by the transport for network failures and non-2xx responses,
    and by the API clients when a response cannot be built into an entity
    (in which case the builder error is chained as ``__cause__``).
    """

    def __init__(
        self,
        message: str,
        code: int = 0,
        response: Any = None,
        request: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.response = response
        self.request = request or {}

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (HTTP {self.code})"
        return self.message


class BuilderException(ZettleError):
    """Raw response data could not be mapped onto an entity type."""

    def __init__(self, entity: str, errors: list[dict[str, Any]] | None = None):
        self.entity = entity
        self.errors = errors or []
        fields = ", ".join(
            ".".join(str(p) for p in err.get("loc", ())) or "<root>"
            for err in self.errors
        )
        detail = f": invalid {fields}" if fields else ""
        super().__init__(f"Could not build {entity}{detail}")


class LocationNotFoundError(ZettleError, KeyError):
    """A location role is not present in the organization's locations."""

    def __init__(self, location_type: str, known: list[str] | None = None):
        self.location_type = location_type
        self.known = sorted(known or [])
        super().__init__(location_type)

    def __str__(self) -> str:
        return (
            f"Location '{self.location_type}' not found "
            f"(known: {', '.join(self.known) or 'none'})"
        )


class UnhandledWebhookError(ZettleError):
    """No registered handler accepted a webhook payload."""

    def __init__(self, event_name: str, message_uuid: str = ""):
        self.event_name = event_name
        self.message_uuid = message_uuid
        super().__init__(f"No handler accepts webhook event '{event_name}'")
