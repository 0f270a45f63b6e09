"""Shared fixtures for the Zettle SDK test suite."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from zettle.api import Inventory, Locations
from zettle.builder import Builder
from zettle.rest.client import RestClientInterface

BASE_URL = "https://inventory.izettle.com"
INTEGRATION_UUID = "integration-0001"

LOCATIONS_RESPONSE = [
    {"uuid": "loc-store", "type": "STORE", "name": "Store", "description": "", "default": True},
    {"uuid": "loc-sold", "type": "SOLD", "name": "Sold", "description": "", "default": False},
    {"uuid": "loc-supplier", "type": "SUPPLIER", "name": "Supplier", "description": "", "default": False},
    {"uuid": "loc-bin", "type": "BIN", "name": "Bin", "description": "", "default": False},
]


@pytest.fixture()
def rest_client() -> MagicMock:
    """REST client fake that answers the locations fetch."""
    client = MagicMock(spec=RestClientInterface)
    client.get.return_value = LOCATIONS_RESPONSE
    return client


@pytest.fixture()
def builder() -> Builder:
    return Builder()


@pytest.fixture()
def locations(rest_client: MagicMock, builder: Builder) -> Locations:
    return Locations(BASE_URL, rest_client, builder)


@pytest.fixture()
def inventory(rest_client: MagicMock, locations: Locations, builder: Builder) -> Inventory:
    return Inventory(BASE_URL, rest_client, locations, builder, INTEGRATION_UUID)
