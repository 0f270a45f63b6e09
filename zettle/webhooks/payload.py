"""Inbound Zettle webhook envelope."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from zettle.entities import WIRE_CONFIG


class Payload(BaseModel):
    """A webhook delivery as posted by Zettle.

    ``payload`` is the event body exactly as delivered (Zettle sends it as a
    JSON-encoded string, and signs that string); ``data`` decodes it.
    """

    model_config = WIRE_CONFIG

    organization_uuid: str = ""
    message_uuid: str = ""
    event_name: str
    message_id: str = ""
    payload: Any = None
    timestamp: str = ""

    @property
    def data(self) -> dict[str, Any]:
        """Decoded event data; empty when the body is absent or not an object."""
        raw = self.payload
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError:
                return {}
        return raw if isinstance(raw, dict) else {}
