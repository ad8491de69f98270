#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Cache import CacheMap
from .Err import AccessorBuildErr, ArgErr, CastErr, Err
from .Log import Log
from .Types import (is_any, is_instance, is_numeric, is_numeric_type, strip_annotated,
                    type_name, unwrap_optional)


def make_cast(target):
    """Build the explicit cast applied by compiled accessors.

    Assignable values pass through unchanged, numbers are converted
    between numeric classes (float to int truncates), anything else
    raises CastErr. Returns None when target is object or Any.
    """
    target = strip_annotated(target)
    if is_any(target):
        return None
    base = unwrap_optional(target)
    numeric = is_numeric_type(base)

    def cast(value):
        if is_instance(value, target):
            return value
        if numeric and is_numeric(value):
            try:
                return base(value)
            except (ValueError, OverflowError, TypeError) as e:
                raise CastErr.make(f"{type_name(type(value))} cannot be cast to {type_name(target)}", e) from e
        src = "null" if value is None else type_name(type(value))
        raise CastErr.make(f"{src} cannot be cast to {type_name(target)}")

    return cast


class AccessorFactory:
    """Builds and caches getter and setter functions for fields and properties.

    A getter is ``fn(obj) -> value`` cast to the requested result type; a
    setter is ``fn(obj, value)`` casting the value to the member's declared
    type. Static members ignore obj and use the target class.
    """

    def __init__(self, members, compiler):
        self._members = members
        self._compiler = compiler
        self._getters = CacheMap("getters")
        self._setters = CacheMap("setters")

    def create_getter(self, target_type, result_type, name):
        """Get a cached getter for a property or field.

        Args:
            target_type: Class declaring or inheriting the member
            result_type: Type the read value is cast to (object for no cast)
            name: Property or field name

        Raises:
            AccessorBuildErr: If no readable property or field exists
        """
        self._check(target_type, name)
        key = (target_type, name, result_type)
        return self._getters.get_or_build(
            key, lambda: self._build_getter(target_type, result_type, name))

    def create_setter(self, target_type, value_type, name):
        """Get a cached setter for a property or field.

        Raises:
            AccessorBuildErr: If no writable property or field exists
        """
        self._check(target_type, name)
        key = (target_type, name, value_type)
        return self._setters.get_or_build(
            key, lambda: self._build_setter(target_type, value_type, name))

    def size(self):
        return self._getters.size() + self._setters.size()

    def clear(self):
        self._getters.clear()
        self._setters.clear()

    @staticmethod
    def _check(target_type, name):
        if not isinstance(target_type, type):
            raise ArgErr.make(f"Expected a class, got {target_type!r}")
        if not name:
            raise ArgErr.make("Member name must not be empty")

    def _build_getter(self, target_type, result_type, name):
        slot = self._members.property(target_type, name)
        if not slot or not slot.can_read():
            slot = self._members.field(target_type, name)
        if not slot:
            raise AccessorBuildErr.make(
                f"No readable property or field: {type_name(target_type)}.{name}")

        cast = make_cast(result_type)
        if not self._compiler.enabled():
            Log.get("slotcache").debug(f"Reflective getter for {slot.qname()}")
            return _reflect_getter(slot, target_type, cast)
        try:
            return self._compiler.getter(slot, target_type, cast)
        except Err:
            raise
        except Exception as e:
            raise AccessorBuildErr.make(f"Cannot compile getter: {slot.qname()}", e) from e

    def _build_setter(self, target_type, value_type, name):
        slot = self._members.property(target_type, name)
        if not slot or not slot.can_write():
            slot = self._members.field(target_type, name)
            if slot and not slot.can_write():
                raise AccessorBuildErr.make(f"Field is readonly: {slot.qname()}")
        if not slot:
            raise AccessorBuildErr.make(
                f"No writable property or field: {type_name(target_type)}.{name}")

        cast = make_cast(slot.type())
        if not self._compiler.enabled():
            Log.get("slotcache").debug(f"Reflective setter for {slot.qname()}")
            return _reflect_setter(slot, target_type, cast)
        try:
            return self._compiler.setter(slot, target_type, cast)
        except Err:
            raise
        except Exception as e:
            raise AccessorBuildErr.make(f"Cannot compile setter: {slot.qname()}", e) from e


def _reflect_getter(slot, owner, cast):
    name = slot.name()
    static = slot.is_static()

    def get(obj):
        val = getattr(owner if static else obj, name)
        return cast(val) if cast is not None else val
    return get


def _reflect_setter(slot, owner, cast):
    name = slot.name()
    static = slot.is_static()

    def set_(obj, value):
        setattr(owner if static else obj, name, cast(value) if cast is not None else value)
    return set_
