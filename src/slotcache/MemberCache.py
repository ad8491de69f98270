#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Cache import CacheMap
from .Sentinel import NotFound
from .Slot import Scope
from .Types import signature_of


class MemberCache:
    """Caches field, property, method and constructor lookups.

    Keys include the scope mask, so a public-only query and an
    all-visibility query for the same name are separate entries. A miss
    scans metadata once and stores the result, NotFound included.
    """

    def __init__(self, metadata):
        self._metadata = metadata
        self._fields = CacheMap("fields")
        self._properties = CacheMap("properties")
        self._overloads = CacheMap("methods")
        self._methods = CacheMap("method")
        self._ctor_lists = CacheMap("ctors")
        self._ctors = CacheMap("ctor")

    @staticmethod
    def _check(cls, name=None, need_name=False):
        from .Err import ArgErr
        if not isinstance(cls, type):
            raise ArgErr.make(f"Expected a class, got {cls!r}")
        if need_name and not name:
            raise ArgErr.make("Member name must not be empty")

    def field(self, cls, name, scope=Scope.All, checked=False):
        """Get a field by name.

        Returns:
            Field or NotFound (UnknownSlotErr if checked)
        """
        self._check(cls, name, True)
        key = (cls, name, scope)
        f = self._fields.get(key, CacheMap.MISSING)
        if f is CacheMap.MISSING:
            f = self._fields.set_(key, self._metadata.find_field(cls, name, scope))
        return self._checked(f, cls, name, checked)

    def property(self, cls, name, scope=Scope.All, checked=False):
        """Get a property by name.

        Returns:
            Property or NotFound (UnknownSlotErr if checked)
        """
        self._check(cls, name, True)
        key = (cls, name, scope)
        p = self._properties.get(key, CacheMap.MISSING)
        if p is CacheMap.MISSING:
            p = self._properties.set_(key, self._metadata.find_property(cls, name, scope))
        return self._checked(p, cls, name, checked)

    def methods(self, cls, name, scope=Scope.All):
        """All overloads of name in declaration order (tuple, maybe empty)."""
        self._check(cls, name, True)
        key = (cls, name, scope)
        ms = self._overloads.get(key, CacheMap.MISSING)
        if ms is CacheMap.MISSING:
            ms = self._overloads.set_(key, tuple(self._metadata.find_methods(cls, name, scope)))
        return ms

    def method(self, cls, name, signature=None, scope=Scope.All, checked=False):
        """Get a method by name and optional exact parameter types.

        Args:
            cls: Class to search
            name: Reflective method name
            signature: Sequence of parameter types, None for the first overload
            scope: Scope mask
            checked: Raise UnknownSlotErr instead of returning NotFound

        Returns:
            Method or NotFound
        """
        self._check(cls, name, True)
        sig = signature_of(signature)
        key = (cls, name, sig, scope)
        m = self._methods.get(key, CacheMap.MISSING)
        if m is CacheMap.MISSING:
            m = self._methods.set_(key, self._select(self.methods(cls, name, scope), sig))
        return self._checked(m, cls, name, checked)

    def ctors(self, cls, scope=Scope.All):
        """All constructors in declaration order (tuple)."""
        self._check(cls)
        key = (cls, scope)
        cs = self._ctor_lists.get(key, CacheMap.MISSING)
        if cs is CacheMap.MISSING:
            cs = self._ctor_lists.set_(key, tuple(self._metadata.find_ctors(cls, scope)))
        return cs

    def ctor(self, cls, signature=None, scope=Scope.All, checked=False):
        """Get a constructor by exact parameter types.

        A None or empty signature selects the parameterless constructor.

        Returns:
            Method flagged Ctor, or NotFound
        """
        self._check(cls)
        sig = signature_of(signature) or ()
        key = (cls, sig, scope)
        c = self._ctors.get(key, CacheMap.MISSING)
        if c is CacheMap.MISSING:
            c = self._ctors.set_(key, self._select(self.ctors(cls, scope), sig))
        return self._checked(c, cls, "__init__", checked)

    @staticmethod
    def _select(candidates, sig):
        for m in candidates:
            if sig is None or m.param_types() == sig:
                return m
        return NotFound

    @staticmethod
    def _checked(slot, cls, name, checked):
        if slot is NotFound and checked:
            from .Err import UnknownSlotErr
            from .Types import type_name
            raise UnknownSlotErr.make(f"{type_name(cls)}.{name}")
        return slot

    #########################################################################
    # Member names (uncached listings)
    #########################################################################

    def static_field_names(self, cls):
        """Names of public static fields."""
        self._check(cls)
        return self._metadata.static_field_names(cls)

    def property_names(self, cls):
        """Names of public instance properties."""
        self._check(cls)
        return self._metadata.property_names(cls)

    def method_names(self, cls):
        """Distinct names of public instance methods, dunders excluded."""
        self._check(cls)
        return self._metadata.method_names(cls)

    def size(self):
        return sum(c.size() for c in self._caches())

    def clear(self):
        for c in self._caches():
            c.clear()

    def _caches(self):
        return (self._fields, self._properties, self._overloads, self._methods,
                self._ctor_lists, self._ctors)
