"""Tests for the inventory client.

Tests:
- Movement batches (one write, N faithful records)
- purchase/supply equivalence with move_stock
- Tracking toggles
- Stock queries and error wrapping
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tests.conftest import BASE_URL, INTEGRATION_UUID, LOCATIONS_RESPONSE
from zettle.api import Inventory, Locations
from zettle.builder import Builder
from zettle.entities import Inventory as InventoryEntity
from zettle.entities import Transaction, VariantInventoryState
from zettle.exceptions import BuilderException, LocationNotFoundError, ZettleRestException
from zettle.rest.client import RestClientInterface

MOVEMENTS_URL = f"{BASE_URL}/v3/movements"
PRODUCTS_URL = f"{BASE_URL}/v3/products"


def _make_inventory(locations_response=LOCATIONS_RESPONSE) -> tuple[Inventory, MagicMock]:
    client = MagicMock(spec=RestClientInterface)
    client.get.return_value = locations_response
    builder = Builder()
    locations = Locations(BASE_URL, client, builder)
    return Inventory(BASE_URL, client, locations, builder, INTEGRATION_UUID), client


# ── Movements ─────────────────────────────────────────────────────────────


_uuids = st.text(alphabet="abcdef0123456789-", min_size=1, max_size=12)
_changes = st.integers(min_value=-1000, max_value=1000).filter(lambda c: c != 0)
_transactions = st.builds(
    Transaction,
    product_uuid=_uuids,
    variant_uuid=_uuids,
    from_location_uuid=st.just("loc-a"),
    to_location_uuid=st.just("loc-b"),
    change=_changes,
)


class TestPerformTransactions:
    @given(st.lists(_transactions, min_size=1, max_size=20))
    @settings(max_examples=50)
    def test_one_write_with_n_records(self, transactions):
        inventory, client = _make_inventory()
        inventory.perform_transactions(*transactions)

        client.post.assert_called_once()
        url, payload = client.post.call_args[0]
        assert url == MOVEMENTS_URL
        assert payload["identifier"] == INTEGRATION_UUID
        assert len(payload["movements"]) == len(transactions)
        for record, t in zip(payload["movements"], transactions):
            assert record == {
                "productUuid": t.product_uuid,
                "variantUuid": t.variant_uuid,
                "from": t.from_location_uuid,
                "to": t.to_location_uuid,
                "change": t.change,
            }

    def test_empty_call_rejected_without_write(self, inventory, rest_client):
        with pytest.raises(ValueError):
            inventory.perform_transactions()
        rest_client.post.assert_not_called()

    def test_write_failure_propagates(self, inventory, rest_client):
        rest_client.post.side_effect = ZettleRestException("rejected", code=400)
        with pytest.raises(ZettleRestException):
            inventory.perform_transactions(Transaction("p", "v", "a", "b", 1))
        assert rest_client.post.call_count == 1


class TestMoveStock:
    def test_resolves_roles_to_uuids(self, inventory, rest_client):
        inventory.move_stock("p1", "v1", "STORE", "BIN", 2)
        _, payload = rest_client.post.call_args[0]
        assert payload["movements"] == [
            {"productUuid": "p1", "variantUuid": "v1", "from": "loc-store", "to": "loc-bin", "change": 2}
        ]

    def test_unknown_role_fails_before_write(self, inventory, rest_client):
        with pytest.raises(LocationNotFoundError):
            inventory.move_stock("p1", "v1", "STORE", "WAREHOUSE", 2)
        rest_client.post.assert_not_called()

    def test_purchase_equals_store_to_sold(self):
        a, client_a = _make_inventory()
        b, client_b = _make_inventory()
        a.purchase("p1", "v1", 3)
        b.move_stock("p1", "v1", "STORE", "SOLD", 3)
        assert client_a.post.call_args == client_b.post.call_args

    def test_supply_equals_supplier_to_store(self):
        a, client_a = _make_inventory()
        b, client_b = _make_inventory()
        a.supply("p1", "v1", 10)
        b.move_stock("p1", "v1", "SUPPLIER", "STORE", 10)
        assert client_a.post.call_args == client_b.post.call_args

    @pytest.mark.parametrize("missing", ["STORE", "SOLD", "SUPPLIER"])
    def test_helpers_fail_when_role_missing(self, missing):
        response = [loc for loc in LOCATIONS_RESPONSE if loc["type"] != missing]
        inventory, client = _make_inventory(response)
        helper = inventory.supply if missing == "SUPPLIER" else inventory.purchase
        with pytest.raises(LocationNotFoundError) as exc_info:
            helper("p1", "v1", 1)
        assert exc_info.value.location_type == missing
        client.post.assert_not_called()

    def test_locations_fetched_once_across_writes(self, inventory, rest_client):
        inventory.purchase("p1", "v1", 1)
        inventory.supply("p1", "v1", 1)
        assert rest_client.get.call_count == 1
        assert rest_client.post.call_count == 2


# ── Tracking ──────────────────────────────────────────────────────────────


class TestTracking:
    def test_start_tracking(self, inventory, rest_client):
        inventory.start_tracking("p1")
        rest_client.post.assert_called_once_with(
            PRODUCTS_URL, [{"productUuid": "p1", "tracking": "enable"}]
        )

    def test_stop_tracking(self, inventory, rest_client):
        inventory.stop_tracking("p1")
        rest_client.post.assert_called_once_with(
            PRODUCTS_URL, [{"productUuid": "p1", "tracking": "disable"}]
        )

    def test_tracking_needs_no_locations(self, inventory, rest_client):
        inventory.start_tracking("p1")
        rest_client.get.assert_not_called()


# ── Queries ───────────────────────────────────────────────────────────────


STOCK_ROWS = [
    {"locationUuid": "loc-store", "productUuid": "p1", "variantUuid": "v1", "balance": 5},
    {"locationUuid": "loc-store", "productUuid": "p1", "variantUuid": "v2", "balance": 0},
]


class TestProductInventory:
    def test_builds_inventory(self, inventory, rest_client):
        rest_client.get.side_effect = [LOCATIONS_RESPONSE, STOCK_ROWS]
        result = inventory.product_inventory("p1", "STORE")

        assert isinstance(result, InventoryEntity)
        assert result.balance("v1") == 5
        assert result.location_uuid == "loc-store"
        rest_client.get.assert_called_with(f"{BASE_URL}/v3/stock/loc-store/products/p1", {})

    def test_malformed_response_raises_one_rest_exception(self, inventory, rest_client):
        malformed = {"variantUuid": "v1"}
        rest_client.get.side_effect = [LOCATIONS_RESPONSE, malformed]

        with pytest.raises(ZettleRestException) as exc_info:
            inventory.product_inventory("p1", "STORE")

        err = exc_info.value
        assert "p1" in str(err)
        assert err.response == malformed
        assert isinstance(err.__cause__, BuilderException)

    def test_transport_failure_propagates_unchanged(self, inventory, rest_client):
        failure = ZettleRestException("GET failed", code=404)
        rest_client.get.side_effect = [LOCATIONS_RESPONSE, failure]
        with pytest.raises(ZettleRestException) as exc_info:
            inventory.product_inventory("p1", "STORE")
        assert exc_info.value is failure

    def test_unknown_location_type(self, inventory):
        with pytest.raises(LocationNotFoundError):
            inventory.product_inventory("p1", "WAREHOUSE")


class TestLocationInventory:
    def test_lists_variant_states(self, inventory, rest_client):
        rest_client.get.side_effect = [LOCATIONS_RESPONSE, STOCK_ROWS]
        result = inventory.location_inventory("STORE")

        assert all(isinstance(s, VariantInventoryState) for s in result)
        assert [s.variant_uuid for s in result] == ["v1", "v2"]
        rest_client.get.assert_called_with(f"{BASE_URL}/v3/stock/loc-store", {})

    def test_malformed_response_wrapped(self, inventory, rest_client):
        rest_client.get.side_effect = [LOCATIONS_RESPONSE, [{"balance": "many"}]]
        with pytest.raises(ZettleRestException) as exc_info:
            inventory.location_inventory("STORE")
        assert isinstance(exc_info.value.__cause__, BuilderException)


class TestCreateInventoryClient:
    def test_wires_settings(self):
        from zettle import Settings, create_inventory_client

        client = MagicMock(spec=RestClientInterface)
        client.get.return_value = LOCATIONS_RESPONSE
        config = Settings(inventory_url="https://example.test/", integration_uuid="int-9")

        inventory = create_inventory_client(config, rest_client=client)
        inventory.purchase("p1", "v1", 1)

        client.get.assert_called_once_with("https://example.test/v3/locations", {})
        url, payload = client.post.call_args[0]
        assert url == "https://example.test/v3/movements"
        assert payload["identifier"] == "int-9"
