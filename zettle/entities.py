"""Typed value objects for the Zettle inventory API.

Remote records (locations, stock balances) are pydantic models so the
builder can validate raw JSON against them; wire names are camelCase and
mapped by alias. Transactions are built locally and never parsed, so they
are plain frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class LocationType(str, Enum):
    """Well-known location roles every Zettle organization has."""

    STORE = "STORE"
    SOLD = "SOLD"
    SUPPLIER = "SUPPLIER"
    BIN = "BIN"


class Location(BaseModel):
    """A stock location, identified remotely by UUID and locally by its type."""

    model_config = WIRE_CONFIG

    uuid: str
    type: str
    name: str = ""
    description: str = ""
    default: bool = False


@dataclass(frozen=True)
class Transaction:
    """One signed stock delta for a product variant between two locations."""

    product_uuid: str
    variant_uuid: str
    from_location_uuid: str
    to_location_uuid: str
    change: int

    def __post_init__(self) -> None:
        if isinstance(self.change, bool) or not isinstance(self.change, int):
            raise ValueError(f"change must be an integer, got {self.change!r}")
        if self.change == 0:
            raise ValueError("change must be non-zero")
        if self.from_location_uuid == self.to_location_uuid:
            raise ValueError(
                f"from and to locations must differ (both {self.from_location_uuid})"
            )

    def to_movement(self) -> dict[str, Any]:
        """Serialize to a /v3/movements record."""
        return {
            "productUuid": self.product_uuid,
            "variantUuid": self.variant_uuid,
            "from": self.from_location_uuid,
            "to": self.to_location_uuid,
            "change": self.change,
        }


class VariantInventoryState(BaseModel):
    """Stock balance of one product variant at one location."""

    model_config = WIRE_CONFIG

    location_uuid: str
    product_uuid: str
    variant_uuid: str
    balance: int


class Inventory(BaseModel):
    """Stock of one product at one location, one row per variant.

    Zettle answers stock queries with a list of variant rows; an object
    with a ``variants`` list or a single row object is accepted as well.
    """

    model_config = WIRE_CONFIG

    variants: tuple[VariantInventoryState, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def wrap_rows(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"variants": data}
        if isinstance(data, dict) and "variants" not in data:
            return {"variants": [data]}
        return data

    @model_validator(mode="after")
    def check_single_product_and_location(self) -> Inventory:
        if len({(v.location_uuid, v.product_uuid) for v in self.variants}) > 1:
            raise ValueError("variant rows span more than one product or location")
        return self

    @property
    def location_uuid(self) -> str | None:
        return self.variants[0].location_uuid if self.variants else None

    @property
    def product_uuid(self) -> str | None:
        return self.variants[0].product_uuid if self.variants else None

    @property
    def total_balance(self) -> int:
        return sum(v.balance for v in self.variants)

    def balance(self, variant_uuid: str) -> int:
        """Balance of one variant; raises KeyError if the variant is absent."""
        for v in self.variants:
            if v.variant_uuid == variant_uuid:
                return v.balance
        raise KeyError(variant_uuid)
