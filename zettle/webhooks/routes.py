"""Zettle webhook ingress: FastAPI route for inbound deliveries.

Each delivery:
1. Parses the JSON envelope
2. Verifies the X-iZettle-Signature header (fail-closed)
3. Checks idempotency by messageUuid (reject duplicates)
4. Dispatches to the first accepting handler in a worker thread
5. Returns 202 Accepted

Security contract:
- Never return error details to the webhook caller
- Return 202 even for unhandled events (don't leak the event support map)
- Return 401 only when the delivery cannot be verified
- Log all webhook activity for audit trail
"""

from __future__ import annotations

import json
import logging
import time

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from zettle.builder import Builder, BuilderInterface
from zettle.config import Settings
from zettle.exceptions import BuilderException
from zettle.webhooks.idempotency import is_duplicate
from zettle.webhooks.payload import Payload
from zettle.webhooks.registry import WebhookHandlerRegistry
from zettle.webhooks.verification import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger(__name__)

TEST_MESSAGE_EVENT = "TestMessage"


def _log_webhook(event_name: str, message_uuid: str, status: str) -> None:
    """Audit log for webhook activity."""
    logger.info(
        "WEBHOOK_AUDIT provider=zettle event=%s id=%s status=%s",
        event_name,
        message_uuid,
        status,
    )


def _unauthorized() -> JSONResponse:
    return JSONResponse({"status": "unauthorized"}, status_code=401)


def _received(status_code: int = 202) -> JSONResponse:
    return JSONResponse({"status": "received"}, status_code=status_code)


async def handle_webhook(
    request: Request,
    registry: WebhookHandlerRegistry,
    builder: BuilderInterface,
    config: Settings | None = None,
) -> JSONResponse:
    signing_key = config.webhook_signing_key if config is not None else None
    redis_url = config.redis_url if config is not None else None
    start = time.time()
    body = await request.body()

    try:
        envelope = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        _log_webhook("unknown", "unknown", "invalid_json")
        return _unauthorized()

    try:
        payload = builder.build(Payload, envelope)
    except BuilderException:
        _log_webhook("unknown", "unknown", "invalid_envelope")
        return _unauthorized()

    signature = request.headers.get(SIGNATURE_HEADER)
    if not verify_signature(payload.timestamp, payload.payload, signature, signing_key):
        _log_webhook(payload.event_name, payload.message_uuid, "signature_failed")
        return _unauthorized()

    if payload.event_name == TEST_MESSAGE_EVENT:
        _log_webhook(payload.event_name, payload.message_uuid, "test_message")
        return _received()

    # Redis and handler callbacks block; keep them off the event loop
    if await run_in_threadpool(is_duplicate, payload.message_uuid, redis_url):
        _log_webhook(payload.event_name, payload.message_uuid, "duplicate")
        return _received(200)

    try:
        await run_in_threadpool(registry.dispatch, payload)
        _log_webhook(payload.event_name, payload.message_uuid, "dispatched")
    except Exception:
        logger.exception(
            "Failed to handle webhook %s (%s)", payload.event_name, payload.message_uuid
        )
        _log_webhook(payload.event_name, payload.message_uuid, "dispatch_failed")

    elapsed_ms = (time.time() - start) * 1000
    logger.debug("Webhook processed in %.1fms: %s", elapsed_ms, payload.event_name)

    return _received()


def register_webhook_routes(
    app: FastAPI,
    registry: WebhookHandlerRegistry,
    builder: BuilderInterface | None = None,
    path: str = "/webhooks/zettle",
    config: Settings | None = None,
) -> None:
    """Mount the Zettle webhook endpoint on ``app``.

    ``config`` supplies the signing key and Redis URL; without it the
    environment settings are used.
    """
    builder = builder or Builder()

    @app.post(path)
    async def zettle_webhook(request: Request):
        """Receive Zettle webhooks (signature-verified)."""
        return await handle_webhook(request, registry, builder, config)
