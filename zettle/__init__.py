"""Client SDK and webhook handling for the Zettle inventory API."""

from __future__ import annotations

from zettle.api import Inventory, Locations
from zettle.builder import Builder
from zettle.config import Settings, settings
from zettle.entities import Location, LocationType, Transaction, VariantInventoryState
from zettle.exceptions import (
    BuilderException,
    LocationNotFoundError,
    UnhandledWebhookError,
    ZettleError,
    ZettleRestException,
)
from zettle.rest import HttpxRestClient, RestClientInterface


def create_inventory_client(
    config: Settings | None = None,
    rest_client: RestClientInterface | None = None,
) -> Inventory:
    """Wire an Inventory client (and its location resolver) from settings."""
    config = config or settings
    rest_client = rest_client or HttpxRestClient(config)
    builder = Builder()
    locations = Locations(config.inventory_url, rest_client, builder)
    return Inventory(
        config.inventory_url,
        rest_client,
        locations,
        builder,
        config.integration_uuid,
    )


__all__ = [
    "Builder",
    "BuilderException",
    "HttpxRestClient",
    "Inventory",
    "Location",
    "LocationNotFoundError",
    "LocationType",
    "Locations",
    "RestClientInterface",
    "Settings",
    "Transaction",
    "UnhandledWebhookError",
    "VariantInventoryState",
    "ZettleError",
    "ZettleRestException",
    "create_inventory_client",
    "settings",
]
