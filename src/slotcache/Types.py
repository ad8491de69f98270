#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import types
import typing
from decimal import Decimal
from fractions import Fraction

# Numeric types eligible for explicit widening/narrowing (bool is excluded)
NUMERIC_TYPES = (int, float, Decimal, Fraction)

NoneType = type(None)

_UNION_TYPES = (typing.Union, types.UnionType)


def type_name(t):
    """Return a readable qualified name for a class or typing construct."""
    if t is None:
        return "None"
    if isinstance(t, type) and not typing.get_args(t):
        if t.__module__ == "builtins":
            return t.__qualname__
        return f"{t.__module__}.{t.__qualname__}"
    return repr(t).replace("typing.", "")


def is_union(t):
    return typing.get_origin(t) in _UNION_TYPES


def is_optional(t):
    """Return True if t is a nullable wrapper like Optional[int] or int | None."""
    return is_union(t) and NoneType in typing.get_args(t)


def unwrap_optional(t):
    """Strip NoneType from a nullable wrapper.

    Optional[int] -> int, Optional[int | str] -> int | str.
    Non-nullable types are returned unchanged.
    """
    if not is_optional(t):
        return t
    args = tuple(a for a in typing.get_args(t) if a is not NoneType)
    if len(args) == 1:
        return args[0]
    return typing.Union[args]


def strip_annotated(t):
    """Annotated[int, ...] -> int"""
    if typing.get_origin(t) is typing.Annotated:
        return typing.get_args(t)[0]
    return t


def is_any(t):
    return t is object or t is typing.Any


def is_numeric_type(t):
    return isinstance(t, type) and issubclass(t, NUMERIC_TYPES) and not issubclass(t, bool)


def is_numeric(value):
    return isinstance(value, NUMERIC_TYPES) and not isinstance(value, bool)


def is_instance(value, target):
    """Check if a value is directly assignable to target.

    Handles plain classes, object/Any, unions, nullable wrappers and
    parameterized generics (checked against their origin only).
    """
    target = strip_annotated(target)
    if is_any(target):
        return True
    if value is None:
        return target is NoneType or target is None or is_optional(target)
    if is_union(target):
        return any(is_instance(value, a) for a in typing.get_args(target))
    origin = typing.get_origin(target)
    if origin is not None:
        if isinstance(origin, type):
            return isinstance(value, origin)
        return False
    if isinstance(target, type):
        return isinstance(value, target)
    return False


def is_assignable(src, target):
    """Check if values of class src are assignable to target.

    Used at build time where only the runtime argument class is known.
    """
    target = strip_annotated(target)
    if is_any(target):
        return True
    if src is NoneType:
        return target is NoneType or target is None or is_optional(target)
    if is_union(target):
        return any(is_assignable(src, a) for a in typing.get_args(target))
    origin = typing.get_origin(target)
    if origin is not None:
        return isinstance(origin, type) and issubclass(src, origin)
    if isinstance(target, type):
        return issubclass(src, target)
    return False


def signature_of(types_):
    """Canonical signature key for an ordered sequence of parameter types."""
    if types_ is None:
        return None
    return tuple(types_)
