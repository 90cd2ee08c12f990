"""Keyed collection of domain objects with sliding expiration.

`KeyedExpiringCollection` stores domain objects by their `id` on top of
:class:`~lru_collection.utils.cache.ExpiringLRUCache`. Eviction, recency
tracking and expiry all belong to the cache; the collection adds coercion of
raw data into the collection's domain type, update-in-place, list-style query
helpers and a JSON projection.

The collection is not thread-safe. Callers sharing one instance across
threads must serialize access themselves; `update` in particular is a
peek followed by a mutation.
"""

from __future__ import annotations

import functools
import json
import logging
import random
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Type,
    TypeVar,
)

from pydantic_core import to_jsonable_python

from .config.models import CollectionConfig, CollectionSettings
from .domain.models import Identifier, get_identifier
from .utils.cache import ExpiringLRUCache

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_MISSING = object()


class MissingIdentifierError(ValueError):
    """Raised when an object without an `id` is added or updated."""

    def __init__(self, message: str = "Missing object id") -> None:
        super().__init__(message)


class KeyedExpiringCollection(Generic[T]):
    """Hold a bunch of `base_object` instances keyed by id.

    Parameters
    ----------
    base_object: Type[T]
        Domain type of every stored value. Raw data passed to `add` is turned
        into one with ``base_object(data, extra)``.
    max_size, max_age, update_age_on_get, stale:
        Cache options; any left as None comes from `settings`.
    timer: Callable[[], float], optional
        Clock for expiry, mostly useful in tests.
    settings: CollectionSettings, optional
        Environment defaults; loaded from the environment when omitted.
    """

    def __init__(
        self,
        base_object: Type[T],
        *,
        max_size: Optional[int] = None,
        max_age: Optional[float] = None,
        update_age_on_get: Optional[bool] = None,
        stale: Optional[bool] = None,
        timer: Optional[Callable[[], float]] = None,
        settings: Optional[CollectionSettings] = None,
    ) -> None:
        settings = settings or CollectionSettings()
        cache_kwargs: Dict[str, Any] = {
            "max_size": settings.max_size if max_size is None else max_size,
            "max_age": settings.max_age_seconds if max_age is None else max_age,
            "update_age_on_get": (
                settings.update_age_on_get
                if update_age_on_get is None
                else update_age_on_get
            ),
            "stale": settings.stale if stale is None else stale,
        }
        if timer is not None:
            cache_kwargs["timer"] = timer
        self.base_object = base_object
        self._cache: ExpiringLRUCache[Identifier, T] = ExpiringLRUCache(
            **cache_kwargs
        )

    @classmethod
    def from_config(
        cls,
        base_object: Type[T],
        name: str,
        config: CollectionConfig,
        settings: Optional[CollectionSettings] = None,
        timer: Optional[Callable[[], float]] = None,
    ) -> "KeyedExpiringCollection[T]":
        """Build the collection named `name` in a file config."""
        resolved = config.options_for(name).resolve(settings or CollectionSettings())
        return cls(base_object, settings=resolved, timer=timer)

    @property
    def size(self) -> int:
        """Number of live entries."""
        return self._cache.length

    def add(
        self,
        obj: Any,
        extra: Any = None,
        replace: bool = False,
        max_age: Optional[float] = None,
        *,
        constructed: Optional[bool] = None,
    ) -> T:
        """Add an object.

        Parameters
        ----------
        obj: Any
            A `base_object` instance or raw data (mapping/object) with an `id`.
        extra: Any
            Extra argument passed to the `base_object` constructor.
        replace: bool
            Replace an existing object with the same id.
        max_age: Optional[float]
            Overrides the default max age (seconds) for this entry.
        constructed: Optional[bool]
            True stores `obj` as-is, False always builds a new `base_object`
            from it. Left as None, only `base_object` instances are kept.

        Returns
        -------
        T
            The existing or newly stored object.

        Raises
        ------
        MissingIdentifierError
            If `obj` has no id.
        """
        key = get_identifier(obj)
        if key is None:
            raise MissingIdentifierError()

        existing = self._cache.get(key)
        if existing is not None and not replace:
            return existing

        if constructed is None:
            constructed = isinstance(obj, self.base_object)
        if not constructed:
            obj = self.base_object(obj, extra)  # type: ignore[call-arg]
            # The constructor may normalize the id; the stored id is the key.
            key = get_identifier(obj)
            if key is None:
                raise MissingIdentifierError()

        if existing is not None:
            logger.debug(
                "collection.add.replace",
                extra={"collection": self.base_object.__name__, "id": key},
            )
        self._cache.set(key, obj, max_age)
        return obj

    def update(self, obj: Any, extra: Any = None, replace: bool = False) -> T:
        """Update an object in place, or add it when absent.

        The lookup does not refresh the entry's recency or age.

        Raises
        ------
        MissingIdentifierError
            If `obj` has no id. ``0`` is a valid id.
        """
        key = get_identifier(obj)
        if key is None:
            raise MissingIdentifierError()

        item = self._cache.peek(key)
        if item is None:
            return self.add(obj, extra, replace)
        item.update(obj, extra)  # type: ignore[attr-defined]
        return item

    def remove(self, obj: Any) -> Optional[T]:
        """Remove an object; return it, or None if nothing was removed."""
        key = get_identifier(obj)
        item = self._cache.get(key) if key is not None else None
        if item is None:
            return None
        self.delete(key)  # type: ignore[arg-type]
        logger.debug(
            "collection.remove",
            extra={"collection": self.base_object.__name__, "id": key},
        )
        return item

    def delete(self, key: Identifier) -> bool:
        return self._cache.delete(key)

    def get(self, key: Identifier) -> Optional[T]:
        """Return the object for `key`, refreshing its recency and age."""
        return self._cache.get(key)

    def peek(self, key: Identifier) -> Optional[T]:
        """Return the object for `key` without touching recency or age.

        An expired entry still awaiting purge is returned once (when stale
        reads are enabled) and dropped.
        """
        return self._cache.peek(key)

    def has(self, key: Identifier) -> bool:
        return self._cache.has(key)

    def keys(self) -> List[Identifier]:
        return self._cache.keys()

    def values(self) -> List[T]:
        return self._cache.values()

    def find(self, func: Callable[[T], Any]) -> Optional[T]:
        """Return the first object for which `func` is truthy, else None."""
        return next((item for item in self.values() if func(item)), None)

    def random(self) -> Optional[T]:
        """Return a random object, or None if the collection is empty."""
        items = self.values()
        if not items:
            return None
        return random.choice(items)

    def filter(self, func: Callable[[T], Any]) -> List[T]:
        """Return all objects for which `func` is truthy."""
        return [item for item in self.values() if func(item)]

    def map(self, func: Callable[[T], R]) -> List[R]:
        return [func(item) for item in self.values()]

    def reduce(self, func: Callable[[Any, T], Any], initial: Any = _MISSING) -> Any:
        """Fold the objects left to right with `func`.

        Without `initial` the first object seeds the fold, and an empty
        collection raises TypeError.
        """
        if initial is _MISSING:
            return functools.reduce(func, self.values())
        return functools.reduce(func, self.values(), initial)

    def every(self, func: Callable[[T], Any]) -> bool:
        return all(func(item) for item in self.values())

    def some(self, func: Callable[[T], Any]) -> bool:
        return any(func(item) for item in self.values())

    def prune(self) -> int:
        """Drop expired entries now; return how many were dropped."""
        return self._cache.prune()

    def clear(self) -> None:
        self._cache.clear()

    def to_json(self) -> Dict[Identifier, T]:
        """Return a mapping of id to stored object."""
        return {get_identifier(item): item for item in self.values()}  # type: ignore

    def json_dump(self) -> str:
        """Serialize :meth:`to_json` to a JSON string."""
        return json.dumps(self.to_json(), default=to_jsonable_python)

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())

    def __len__(self) -> int:
        return self.size

    def __str__(self) -> str:
        return f"[{type(self).__name__}<{self.base_object.__name__}>]"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(base_object={self.base_object.__name__}, "
            f"size={self.size})"
        )
