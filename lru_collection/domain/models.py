"""Domain object contract for items stored in a keyed collection.

A collection only relies on two things from the objects it holds: an `id`
attribute and an in-place `update(data, extra)` method. `CollectionItem` is a
Pydantic base model implementing that contract so domain types can be declared
as plain typed models (e.g. ``class User(CollectionItem): name: str``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict

Identifier = Union[str, int]


@runtime_checkable
class DomainObject(Protocol):
    """Contract for values held by a keyed collection.

    Implementations must be constructible as ``cls(data, extra)`` and must
    mutate themselves in place from ``update(data, extra)``.
    """

    id: Identifier

    def update(self, data: Any, extra: Any = None) -> Any:
        """Apply `data` to this object in place."""


def get_identifier(obj: Any) -> Optional[Identifier]:
    """Return the `id` of a mapping or object, or None when it has none."""

    if isinstance(obj, Mapping):
        return obj.get("id")
    return getattr(obj, "id", None)


def as_field_dict(data: Any) -> Dict[str, Any]:
    """Normalize raw item data (mapping, model or plain object) to a dict."""

    if isinstance(data, BaseModel):
        return data.model_dump()
    if isinstance(data, Mapping):
        return dict(data)
    return dict(vars(data))


class CollectionItem(BaseModel):
    """Base model for objects stored in a :class:`KeyedExpiringCollection`.

    Attributes
    ----------
    id: Identifier
        Unique identifier of the item; also the collection key.

    Unknown fields are kept as extra attributes so partial payloads can be
    stored without declaring every field up front.
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    id: Identifier

    def __init__(self, data: Any = None, extra: Any = None, /, **fields: Any) -> None:
        if data is not None:
            fields = {**as_field_dict(data), **fields}
        super().__init__(**fields)

    def update(self, data: Any, extra: Any = None) -> "CollectionItem":
        """Copy every field of `data` except `id` onto this item.

        Parameters
        ----------
        data: Any
            Mapping, model or object carrying the new field values.
        extra: Any
            Unused here; subclasses may need it to resolve related objects.

        Returns
        -------
        CollectionItem
            This same instance, mutated.
        """
        for name, value in as_field_dict(data).items():
            if name == "id":
                continue
            setattr(self, name, value)
        return self
