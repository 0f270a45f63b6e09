"""Zettle webhook signature verification.

Zettle signs every delivery with the subscription's signing key:
X-iZettle-Signature = hex(HMAC-SHA256(key, "{timestamp}.{payload}")), where
timestamp and payload are the envelope fields exactly as delivered.

Security contract:
- Comparison uses hmac.compare_digest() (constant-time)
- Missing signing key -> verification always fails (fail-closed)
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from zettle.config import settings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-izettle-signature"

_SIGNING_KEY = settings.webhook_signing_key


def compute_signature(signing_key: str, timestamp: str, payload: str) -> str:
    """Hex HMAC-SHA256 of ``"{timestamp}.{payload}"``."""
    message = f"{timestamp}.{payload}".encode("utf-8")
    return hmac.new(signing_key.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(
    timestamp: str,
    payload: object,
    signature: str | None,
    signing_key: str | None = None,
) -> bool:
    """Check a delivery's signature against the configured signing key.

    Args:
        timestamp: The envelope's ``timestamp`` field
        payload: The envelope's ``payload`` field (must be the raw string)
        signature: Value of the X-iZettle-Signature header
        signing_key: Overrides the key from the environment settings

    Returns:
        True if the signature is valid
    """
    key = signing_key if signing_key is not None else _SIGNING_KEY
    if not key:
        logger.warning("ZETTLE_WEBHOOK_SIGNING_KEY not set, rejecting webhook")
        return False
    if not signature or not isinstance(payload, str):
        return False

    expected = compute_signature(key, timestamp, payload)
    return hmac.compare_digest(expected, signature.lower())
