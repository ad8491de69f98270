#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Slot import Slot, SlotFlags


class Field(Slot):
    """Field reflection - a data attribute of a class.

    Fields are discovered from class annotations (instance fields unless
    annotated ClassVar), __slots__, and plain class-level data attributes
    (static fields).
    """

    def __init__(self, parent=None, name="", flags=0, type_=object, facets=None):
        """Create a Field reflection object.

        Args:
            parent: Declaring class
            name: Field name
            flags: Slot flags (SlotFlags values)
            type_: Declared field type, object if unknown
            facets: Facets from Annotated metadata
        """
        super().__init__(parent, name, flags, facets)
        self._type = type_

    def is_field(self):
        return True

    def type(self):
        return self._type

    def can_read(self):
        return True

    def can_write(self):
        return not (self._flags & SlotFlags.Readonly)

    def get(self, obj=None):
        """Get field value from object (class for static fields).

        This is the uncompiled reflective path.
        """
        if self.is_static():
            return getattr(self._parent, self._name)
        return getattr(obj, self._name)

    def set_(self, obj, val):
        """Set field value on object (class for static fields)."""
        if self.is_static():
            setattr(self._parent, self._name, val)
        else:
            setattr(obj, self._name, val)


class Property(Slot):
    """Property reflection - a ``property`` descriptor on a class."""

    def __init__(self, parent=None, name="", flags=0, type_=object, prop=None, facets=None):
        super().__init__(parent, name, flags, facets)
        self._type = type_
        self._prop = prop

    def is_property(self):
        return True

    def type(self):
        return self._type

    def descriptor(self):
        """Return the underlying property object."""
        return self._prop

    def can_read(self):
        return self._prop is not None and self._prop.fget is not None

    def can_write(self):
        return self._prop is not None and self._prop.fset is not None

    def get(self, obj):
        if not self.can_read():
            from .Err import AccessorBuildErr
            raise AccessorBuildErr.make(f"Property not readable: {self.qname()}")
        return self._prop.fget(obj)

    def set_(self, obj, val):
        if not self.can_write():
            from .Err import AccessorBuildErr
            raise AccessorBuildErr.make(f"Property not writable: {self.qname()}")
        self._prop.fset(obj, val)
