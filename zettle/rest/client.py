"""HTTP transport for the Zettle REST API.

The API clients only see ``RestClientInterface``; ``HttpxRestClient`` is
the production implementation. It authenticates with a bearer token,
retries failures the retry policy deems safe and turns every remaining failure (network,
non-2xx, undecodable body) into a ``ZettleRestException``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from zettle.config import Settings, settings as default_settings
from zettle.exceptions import ZettleRestException
from zettle.rest.retry import RetryPolicy, send_with_retry

logger = logging.getLogger(__name__)


@runtime_checkable
class RestClientInterface(Protocol):
    """Transport capability used by the API clients."""

    def get(self, url: str, query: dict[str, Any] | None = None) -> Any: ...

    def post(self, url: str, payload: Any) -> Any: ...

    def put(self, url: str, payload: Any) -> Any: ...

    def delete(self, url: str) -> Any: ...


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxRestClient:
    """Synchronous Zettle REST client built on ``httpx.Client``."""

    def __init__(
        self,
        config: Settings | None = None,
        http_client: httpx.Client | None = None,
    ):
        self._config = config or default_settings
        self._http = http_client or httpx.Client(timeout=self._config.timeout)
        self._retry = RetryPolicy(
            max_retries=self._config.max_retries,
            base_delay=self._config.retry_base_delay,
            max_delay=self._config.retry_max_delay,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        return headers

    def _send_once(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = self._http.request(method, url, headers=self._headers(), **kwargs)
        response.raise_for_status()
        return response

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        request_info = {"method": method, "url": url, **kwargs}
        try:
            response = send_with_retry(
                lambda: self._send_once(method, url, **kwargs), method, url, self._retry
            )
        except httpx.HTTPStatusError as e:
            body = _decode(e.response)
            logger.warning(
                "Zettle %s %s failed with HTTP %d", method, url, e.response.status_code
            )
            raise ZettleRestException(
                f"{method} {url} was rejected",
                code=e.response.status_code,
                response=body,
                request=request_info,
            ) from e
        except httpx.TransportError as e:
            logger.warning("Zettle %s %s failed: %s", method, url, type(e).__name__)
            raise ZettleRestException(
                f"{method} {url} could not be sent: {e}",
                request=request_info,
            ) from e

        logger.debug("Zettle %s %s -> %d", method, url, response.status_code)
        return _decode(response)

    def get(self, url: str, query: dict[str, Any] | None = None) -> Any:
        return self._request("GET", url, params=query or None)

    def post(self, url: str, payload: Any) -> Any:
        return self._request("POST", url, json=payload)

    def put(self, url: str, payload: Any) -> Any:
        return self._request("PUT", url, json=payload)

    def delete(self, url: str) -> Any:
        return self._request("DELETE", url)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> HttpxRestClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
