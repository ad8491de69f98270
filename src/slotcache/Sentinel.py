#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class _NotFoundType:
    """Cached lookup result for a type or slot which does not exist.

    Falsy so lookups read naturally: ``if not members.field(cls, "x"): ...``
    """

    _instance = None

    def __new__(cls):
        if _NotFoundType._instance is None:
            _NotFoundType._instance = object.__new__(cls)
        return _NotFoundType._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NotFound"

    def __reduce__(self):
        return (_NotFoundType, ())


class _NoResultType:
    """Result of invoking a method declared to return None."""

    _instance = None

    def __new__(cls):
        if _NoResultType._instance is None:
            _NoResultType._instance = object.__new__(cls)
        return _NoResultType._instance

    def __repr__(self):
        return "NoResult"

    def __reduce__(self):
        return (_NoResultType, ())


NotFound = _NotFoundType()
NoResult = _NoResultType()
