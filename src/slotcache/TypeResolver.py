#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Cache import CacheMap
from .Sentinel import NotFound


class TypeResolver:
    """Resolves qualified type names to classes, caching hits and misses.

    A resolved name is never looked up again until clear(), even if the
    set of loaded modules changes afterwards.
    """

    def __init__(self, metadata):
        self._metadata = metadata
        self._cache = CacheMap("types")

    def resolve(self, name, checked=False):
        """Resolve a type name like 'int', 'collections.OrderedDict' or 'Point'.

        Args:
            name: Qualified or unqualified type name
            checked: If True, raise UnknownTypeErr instead of returning NotFound

        Returns:
            Class or NotFound
        """
        if not name:
            if checked:
                from .Err import ArgErr
                raise ArgErr.make("Type name must not be empty")
            return NotFound

        t = self._cache.get(name, CacheMap.MISSING)
        if t is CacheMap.MISSING:
            t = self._cache.set_(name, self._metadata.find_type(name))

        if t is NotFound and checked:
            from .Err import UnknownTypeErr
            raise UnknownTypeErr.make(name)
        return t

    def types_in(self, module, predicate=None):
        """Classes defined in module, optionally filtered (not cached)."""
        if module is None:
            from .Err import ArgErr
            raise ArgErr.make("module must not be None")
        return self._metadata.types_in(module, predicate)

    def all_types(self, predicate=None):
        """Lazily iterate classes of every loaded module (not cached)."""
        return self._metadata.all_types(predicate)

    def size(self):
        return self._cache.size()

    def clear(self):
        self._cache.clear()
