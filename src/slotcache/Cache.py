#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import threading

# Marks a key with no entry; None and NotFound are both storable values
_MISSING = object()


class CacheMap:
    """Append-only concurrent map backing every reflection cache.

    Reads are lock-free dict lookups. Metadata caches use the plain
    check-build-store sequence (get, then set_) without exclusion, so two
    threads missing the same key may both build; the last write wins.
    Compiled-callable caches use get_or_build() which runs the build under
    the map's reentrant lock.
    """

    # Pass as def_val to get() to tell an absent key from a stored None
    MISSING = _MISSING

    def __init__(self, name="cache"):
        self._name = name
        self._map = {}
        self._lock = threading.RLock()

    @staticmethod
    def make(name="cache"):
        return CacheMap(name)

    def name(self):
        return self._name

    def is_empty(self):
        return len(self._map) == 0

    def size(self):
        return len(self._map)

    def get(self, key, def_val=None):
        """Get a value by its key or return def_val."""
        return self._map.get(key, def_val)

    def contains_key(self, key):
        return key in self._map

    def set_(self, key, val):
        """Store a value - last write wins."""
        self._map[key] = val
        return val

    def get_or_build(self, key, build):
        """Get the value for key, or build and store it under the lock.

        Args:
            key: Cache key
            build: No-arg function producing the value; an exception
                   propagates and nothing is stored

        Returns:
            Cached or newly built value
        """
        val = self._map.get(key, _MISSING)
        if val is not _MISSING:
            return val
        with self._lock:
            val = self._map.get(key, _MISSING)
            if val is not _MISSING:
                return val
            val = build()
            self._map[key] = val
            return val

    def clear(self):
        """Remove all key/value pairs."""
        with self._lock:
            self._map.clear()

    def keys(self):
        return list(self._map.keys())

    def vals(self):
        return list(self._map.values())

    def __len__(self):
        return len(self._map)

    def __contains__(self, key):
        return key in self._map

    def to_str(self):
        return f"CacheMap({self._name}, size={len(self._map)})"

    def __str__(self):
        return self.to_str()
