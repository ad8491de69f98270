#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class Scope:
    """Visibility scope bitmask used by member lookups.

    Public/NonPublic select on naming convention (leading underscore),
    Instance/Static select on how the member is bound.
    """
    Public = 0x01
    NonPublic = 0x02
    Instance = 0x04
    Static = 0x08

    All = Public | NonPublic | Instance | Static
    PublicInstance = Public | Instance
    PublicStatic = Public | Static

    @staticmethod
    def is_public_name(name):
        """Dunder names are public, other underscore names are not."""
        if name.startswith("__") and name.endswith("__"):
            return True
        return not name.startswith("_")

    @staticmethod
    def matches(scope, flags):
        """Return True if slot flags fall inside the scope mask."""
        visible = (flags & SlotFlags.Public and scope & Scope.Public) or \
                  (not flags & SlotFlags.Public and scope & Scope.NonPublic)
        if not visible:
            return False
        if flags & SlotFlags.Static:
            return bool(scope & Scope.Static)
        return bool(scope & Scope.Instance)


class SlotFlags:
    """Slot flag constants."""
    Public = 0x00000001
    Private = 0x00000002
    Abstract = 0x00000400
    Static = 0x00000800
    Ctor = 0x00000100
    Const = 0x00002000
    Readonly = 0x00004000
    Getter = 0x00010000
    Setter = 0x00020000
    ClassMethod = 0x00040000
    Void = 0x00080000


class Slot:
    """Base class for Field, Property and Method reflection."""

    def __init__(self, parent=None, name="", flags=0, facets=None):
        self._parent = parent
        self._name = name
        self._flags = flags
        self._facets = tuple(facets) if facets else ()

    def parent(self):
        """Get declaring class."""
        return self._parent

    def name(self):
        return self._name

    def flags(self):
        return self._flags

    def qname(self):
        """Get qualified name (module.Class.slot)."""
        if self._parent is not None:
            from .Types import type_name
            return f"{type_name(self._parent)}.{self._name}"
        return self._name

    def is_field(self):
        return False

    def is_property(self):
        return False

    def is_method(self):
        return False

    def is_ctor(self):
        return (self._flags & SlotFlags.Ctor) != 0

    def is_public(self):
        return (self._flags & SlotFlags.Public) != 0

    def is_private(self):
        return not self.is_public()

    def is_static(self):
        return (self._flags & SlotFlags.Static) != 0

    def is_abstract(self):
        return (self._flags & SlotFlags.Abstract) != 0

    def declared_facets(self):
        """Facets attached directly to this slot (no inheritance)."""
        return self._facets

    def to_str(self):
        return self.qname()

    def __str__(self):
        return self.to_str()

    def __repr__(self):
        return f"{type(self).__name__}({self.qname()})"

    # Slots are metadata snapshots - equality is by declaring class, kind and name
    def _key(self):
        return (type(self), self._parent, self._name)

    def __eq__(self, other):
        if not isinstance(other, Slot):
            return False
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())
