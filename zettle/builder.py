"""Response-to-entity builder.

The API clients depend only on the ``BuilderInterface`` capability: turn
raw decoded JSON into an entity of a requested type, or fail with a
``BuilderException``. The default ``Builder`` validates through pydantic
and accepts per-type overrides for payloads that need custom mapping.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from zettle.exceptions import BuilderException

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class BuilderInterface(Protocol):
    """Capability: build an entity of type ``entity_type`` from raw data."""

    def build(self, entity_type: Any, data: Any) -> Any:
        """Return the entity, or raise BuilderException on shape mismatch."""
        ...


def _type_name(entity_type: Any) -> str:
    return getattr(entity_type, "__name__", None) or str(entity_type)


class Builder:
    """Default builder backed by pydantic ``TypeAdapter`` validation."""

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter] = {}
        self._overrides: dict[Any, Callable[[Any], Any]] = {}

    def register(self, entity_type: Any, factory: Callable[[Any], Any]) -> None:
        """Use ``factory(data)`` instead of pydantic validation for ``entity_type``.

        The factory may raise ValueError, TypeError or KeyError; those are
        reported as BuilderException like validation errors.
        """
        self._overrides[entity_type] = factory

    def _adapter(self, entity_type: Any) -> TypeAdapter:
        adapter = self._adapters.get(entity_type)
        if adapter is None:
            adapter = TypeAdapter(entity_type)
            self._adapters[entity_type] = adapter
        return adapter

    def build(self, entity_type: type[T] | Any, data: Any) -> T:
        name = _type_name(entity_type)
        factory = self._overrides.get(entity_type)
        if factory is not None:
            try:
                return factory(data)
            except (ValueError, TypeError, KeyError) as e:
                raise BuilderException(name, [{"loc": (), "msg": str(e)}]) from e

        try:
            return self._adapter(entity_type).validate_python(data)
        except ValidationError as e:
            errors = e.errors(include_url=False)
            logger.debug("Build of %s failed with %d error(s)", name, len(errors))
            raise BuilderException(name, errors) from e
