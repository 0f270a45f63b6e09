"""Zettle API clients."""

from zettle.api.inventory import Inventory
from zettle.api.locations import Locations

__all__ = ["Inventory", "Locations"]
