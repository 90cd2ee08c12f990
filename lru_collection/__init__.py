"""
LRU collection package.

A keyed collection of domain objects with sliding expiration, built on a
`cachetools` LRU cache, plus its configuration and logging helpers.
"""

from .__version__ import __version__
from .collection import KeyedExpiringCollection, MissingIdentifierError
from .domain.models import CollectionItem, DomainObject, Identifier

__all__ = [
    "__version__",
    "CollectionItem",
    "DomainObject",
    "Identifier",
    "KeyedExpiringCollection",
    "MissingIdentifierError",
]
