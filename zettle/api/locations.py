"""Location resolver: maps location roles to the organization's location UUIDs.

Locations are fetched once per resolver and cached for its lifetime.
There is no expiry and no refresh; build a new client to pick up changes.
"""

from __future__ import annotations

import logging
import threading

from zettle.builder import BuilderInterface
from zettle.entities import Location
from zettle.exceptions import (
    BuilderException,
    LocationNotFoundError,
    ZettleRestException,
)
from zettle.rest.client import RestClientInterface

logger = logging.getLogger(__name__)


class Locations:
    """Fetch-once cache of ``Location`` entities keyed by location type."""

    PATH = "/v3/locations"

    def __init__(
        self,
        base_url: str,
        rest_client: RestClientInterface,
        builder: BuilderInterface,
    ):
        self._url = base_url.rstrip("/") + self.PATH
        self._rest = rest_client
        self._builder = builder
        self._locations: dict[str, Location] | None = None
        self._lock = threading.Lock()

    def all(self) -> dict[str, Location]:
        """Return every location keyed by type, fetching on first use.

        Concurrent first callers wait on a single fetch. A failed fetch leaves
        the cache empty so the next call tries again.
        """
        cached = self._locations
        if cached is not None:
            logger.debug("Location cache hit (%d locations)", len(cached))
            return dict(cached)

        with self._lock:
            if self._locations is None:
                self._locations = self._fetch()
            return dict(self._locations)

    def get(self, location_type: str) -> Location:
        """Resolve one location role, raising LocationNotFoundError if unknown."""
        key = str(getattr(location_type, "value", location_type))
        locations = self.all()
        try:
            return locations[key]
        except KeyError:
            raise LocationNotFoundError(key, list(locations)) from None

    def _fetch(self) -> dict[str, Location]:
        result = self._rest.get(self._url, {})
        try:
            locations = self._builder.build(list[Location], result)
        except BuilderException as e:
            raise ZettleRestException(
                "Could not build locations after fetching them",
                response=result,
                request={"method": "GET", "url": self._url},
            ) from e

        logger.info("Fetched %d Zettle locations", len(locations))
        return {location.type: location for location in locations}
