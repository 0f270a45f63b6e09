"""Retry policy for Zettle API calls.

Reads are retried on throttling, gateway errors and transport failures.
Writes (stock movements, tracking toggles) are retried only when Zettle
cannot have applied them: the connection was never established, or the
request was throttled with 429. A write that timed out or hit a 5xx may
already have moved stock, so it is surfaced to the caller instead.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable

import httpx

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

# Zettle answers 429 when throttling and 502-504 from its gateway
READ_RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})
WRITE_RETRY_STATUSES = frozenset({429})

# Raised before any byte of the request reached the server
UNSENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times, and after which failures, a request is re-sent."""

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    jitter: float = 0.3

    def should_retry(self, method: str, error: Exception) -> bool:
        safe = method.upper() in SAFE_METHODS
        if isinstance(error, httpx.HTTPStatusError):
            statuses = READ_RETRY_STATUSES if safe else WRITE_RETRY_STATUSES
            return error.response.status_code in statuses
        if isinstance(error, UNSENT_ERRORS):
            return True
        return safe and isinstance(error, httpx.TransportError)

    def delay(self, attempt: int, response: httpx.Response | None = None) -> float:
        """Seconds to wait before retry number ``attempt + 1``.

        A Retry-After in seconds on a 429/503 wins over the backoff curve.
        """
        if response is not None and response.status_code in (429, 503):
            retry_after = response.headers.get("Retry-After", "")
            if retry_after.isdigit():
                return min(float(retry_after), self.max_delay)

        backoff = min(self.base_delay * (2**attempt), self.max_delay)
        spread = backoff * self.jitter
        return max(0.1, backoff + random.uniform(-spread, spread))


def send_with_retry(
    send: Callable[[], httpx.Response],
    method: str,
    url: str,
    policy: RetryPolicy,
) -> httpx.Response:
    """Call ``send`` until it succeeds, the policy declines, or retries run out.

    ``send`` must raise ``httpx.HTTPStatusError`` for error responses. The
    last error is re-raised unchanged.
    """
    attempt = 0
    while True:
        try:
            return send()
        except (httpx.HTTPStatusError, httpx.TransportError) as e:
            if attempt >= policy.max_retries or not policy.should_retry(method, e):
                raise
            response = e.response if isinstance(e, httpx.HTTPStatusError) else None
            wait = policy.delay(attempt, response)
            attempt += 1
            logger.warning(
                "Retrying %s %s (%d/%d) after %s, waiting %.1fs",
                method,
                url,
                attempt,
                policy.max_retries,
                f"HTTP {response.status_code}" if response is not None else type(e).__name__,
                wait,
            )
            time.sleep(wait)
