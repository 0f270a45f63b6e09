"""Webhook idempotency: Redis-based deduplication of Zettle deliveries.

Security contract:
- Tracks message UUIDs in Redis with 24h TTL
- Duplicates are acknowledged with 200 (Zettle redelivers on errors)
- Key pattern: webhook:seen:zettle:{message_uuid}
- If Redis is down, falls back to allowing (fail-open for availability)
"""

from __future__ import annotations

import logging

import redis

from zettle.config import settings

logger = logging.getLogger(__name__)

_DEDUP_TTL_SECONDS = 86400  # 24 hours

_KEY_PREFIX = "webhook:seen:zettle"


def _get_redis(redis_url: str | None = None) -> redis.Redis:
    return redis.from_url(redis_url or settings.redis_url, decode_responses=True)


def is_duplicate(message_uuid: str, redis_url: str | None = None) -> bool:
    """Check-and-mark a delivery as seen.

    Uses SET NX so concurrent deliveries of the same message see exactly one
    "new" answer.

    Returns:
        True if this message has already been seen
    """
    if not message_uuid:
        return False  # No ID = can't dedup, allow through

    key = f"{_KEY_PREFIX}:{message_uuid}"

    try:
        r = _get_redis(redis_url)
        was_set = r.set(key, "1", nx=True, ex=_DEDUP_TTL_SECONDS)
        if not was_set:
            logger.info("Duplicate webhook rejected: %s", message_uuid)
            return True
        return False
    except redis.RedisError:
        logger.warning(
            "Redis unavailable for webhook dedup, allowing %s",
            message_uuid,
            exc_info=True,
        )
        return False
