#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class Param:
    """Method parameter metadata for reflection.

    Represents a single positional parameter of a method or constructor:
    - name: Parameter name
    - type: Parameter type (class or typing construct, object if unannotated)
    - has_default: Whether parameter has a default value
    """

    def __init__(self, name, param_type=object, has_default=False, default=None):
        self._name = name
        self._type = param_type
        self._has_default = has_default
        self._default = default

    def name(self):
        return self._name

    def type(self):
        return self._type

    def has_default(self):
        return self._has_default

    def default(self):
        return self._default

    def to_str(self):
        from .Types import type_name
        return f"{type_name(self._type)} {self._name}"

    def __repr__(self):
        return f"Param({self._name}, {self._type!r})"

    def __eq__(self, other):
        if not isinstance(other, Param):
            return False
        return self._name == other._name and self._type == other._type \
            and self._has_default == other._has_default

    def __hash__(self):
        return hash((self._name, self._type))
