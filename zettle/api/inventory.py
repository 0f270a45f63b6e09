"""Zettle inventory client: stock movements, tracking toggles and stock queries.

Every stock-altering helper goes through ``perform_transactions`` so all
writes share one shape: a list of movement deltas plus the integration
identifier, sent as a single request. Atomicity across movements is up to
Zettle; locally the only guarantee is one HTTP call per invocation.
"""

from __future__ import annotations

import logging
from typing import Any

from zettle.api.locations import Locations
from zettle.builder import BuilderInterface
from zettle.entities import Inventory as InventoryEntity
from zettle.entities import LocationType, Transaction, VariantInventoryState
from zettle.exceptions import BuilderException, ZettleRestException
from zettle.rest.client import RestClientInterface

logger = logging.getLogger(__name__)


class Inventory:
    """Inventory operations for one organization."""

    def __init__(
        self,
        base_url: str,
        rest_client: RestClientInterface,
        locations: Locations,
        builder: BuilderInterface,
        integration_uuid: str,
    ):
        self._base_url = base_url.rstrip("/")
        self._rest = rest_client
        self._locations = locations
        self._builder = builder
        self._integration_uuid = integration_uuid

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _location_uuid(self, location_type: str) -> str:
        return self._locations.get(location_type).uuid

    # ── Stock movements ──────────────────────────────────────────────────

    def perform_transactions(self, *transactions: Transaction) -> None:
        """Send all transactions as one movement batch."""
        if not transactions:
            raise ValueError("at least one transaction is required")

        payload = {
            "movements": [t.to_movement() for t in transactions],
            "identifier": self._integration_uuid,
        }
        self._rest.post(self._url("/v3/movements"), payload)
        logger.info(
            "Posted %d stock movement(s) for product(s) %s",
            len(transactions),
            ", ".join(sorted({t.product_uuid for t in transactions})),
        )

    def move_stock(
        self,
        product_uuid: str,
        variant_uuid: str,
        from_: str,
        to: str,
        change: int,
    ) -> None:
        """Move ``change`` units between two location roles (e.g. "STORE" -> "BIN")."""
        transaction = Transaction(
            product_uuid=product_uuid,
            variant_uuid=variant_uuid,
            from_location_uuid=self._location_uuid(from_),
            to_location_uuid=self._location_uuid(to),
            change=change,
        )
        self.perform_transactions(transaction)

    def purchase(self, product_uuid: str, variant_uuid: str, change: int) -> None:
        """Record a sale: STORE -> SOLD."""
        self.move_stock(
            product_uuid, variant_uuid, LocationType.STORE, LocationType.SOLD, change
        )

    def supply(self, product_uuid: str, variant_uuid: str, change: int) -> None:
        """Record incoming stock: SUPPLIER -> STORE."""
        self.move_stock(
            product_uuid, variant_uuid, LocationType.SUPPLIER, LocationType.STORE, change
        )

    # ── Tracking ─────────────────────────────────────────────────────────

    def start_tracking(self, product_uuid: str) -> None:
        self._set_tracking(product_uuid, True)

    def stop_tracking(self, product_uuid: str) -> None:
        self._set_tracking(product_uuid, False)

    def _set_tracking(self, product_uuid: str, enable: bool) -> None:
        payload = [
            {
                "productUuid": product_uuid,
                "tracking": "enable" if enable else "disable",
            }
        ]
        self._rest.post(self._url("/v3/products"), payload)
        logger.info(
            "Inventory tracking %s for product %s",
            "enabled" if enable else "disabled",
            product_uuid,
        )

    # ── Queries ──────────────────────────────────────────────────────────

    def product_inventory(
        self, product_uuid: str, location_type: str = LocationType.STORE
    ) -> InventoryEntity:
        """Fetch the per-variant stock of one product at one location.

        Raises ZettleRestException both for failed requests and for responses
        that cannot be built into an Inventory; in the latter case the
        BuilderException is the ``__cause__``.
        """
        location_uuid = self._location_uuid(location_type)
        url = self._url(f"/v3/stock/{location_uuid}/products/{product_uuid}")
        result = self._rest.get(url, {})

        return self._build(
            InventoryEntity,
            result,
            url,
            f"Could not build Inventory entity of product {product_uuid} after fetching it",
        )

    def location_inventory(
        self, location_type: str = LocationType.STORE
    ) -> list[VariantInventoryState]:
        """Fetch every variant balance held at one location."""
        location_uuid = self._location_uuid(location_type)
        url = self._url(f"/v3/stock/{location_uuid}")
        result = self._rest.get(url, {})

        return self._build(
            list[VariantInventoryState],
            result,
            url,
            f"Could not build inventory of location {location_uuid} after fetching it",
        )

    def _build(self, entity_type: Any, result: Any, url: str, message: str) -> Any:
        try:
            return self._builder.build(entity_type, result)
        except BuilderException as e:
            logger.warning("%s: %s", message, e)
            raise ZettleRestException(
                message,
                response=result,
                request={"method": "GET", "url": url},
            ) from e
