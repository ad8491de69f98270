#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Cache import CacheMap
from .Sentinel import NotFound
from .Slot import Slot
from .Types import type_name


class FacetIndex:
    """Caches facet lookups on classes and slots, empty results included."""

    def __init__(self, metadata):
        self._metadata = metadata
        self._cache = CacheMap("facets")

    def facets(self, target, facet_type=None, inherit=False):
        """Get facets of a class or slot.

        Args:
            target: Class or Slot
            facet_type: Facet subclass to filter by, None for every facet
            inherit: Include inheritable facets of base classes/overridden slots

        Returns:
            Tuple of facet instances (possibly empty)
        """
        if not isinstance(target, (type, Slot)):
            from .Err import ArgErr
            raise ArgErr.make(f"Facet target must be a class or slot, got {target!r}")
        key = (target, facet_type, bool(inherit))
        found = self._cache.get(key, CacheMap.MISSING)
        if found is CacheMap.MISSING:
            found = self._cache.set_(
                key, tuple(self._metadata.find_facets(target, facet_type, inherit)))
        return found

    def facet(self, target, facet_type, inherit=False, checked=False):
        """Get the first facet of facet_type.

        Returns:
            Facet instance or NotFound (UnknownFacetErr if checked)
        """
        found = self.facets(target, facet_type, inherit)
        if found:
            return found[0]
        if checked:
            from .Err import UnknownFacetErr
            raise UnknownFacetErr.make(f"Facet not found: {type_name(facet_type)}")
        return NotFound

    def has_facet(self, target, facet_type, inherit=False):
        return len(self.facets(target, facet_type, inherit)) > 0

    def size(self):
        return self._cache.size()

    def clear(self):
        self._cache.clear()
