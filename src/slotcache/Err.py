#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class Err(Exception):
    """Base error class"""

    def __init__(self, msg=None, cause=None):
        Exception.__init__(self, msg)
        self._msg = msg
        self._cause = cause

    @classmethod
    def make(cls, msg=None, cause=None):
        """Factory method - creates instance of the calling class"""
        return cls(msg, cause)

    def msg(self):
        return self._msg if self._msg is not None else ""

    def cause(self):
        return self._cause

    def to_str(self):
        name = type(self).__name__
        if self._msg:
            return f"{name}: {self._msg}"
        return name

    def trace_to_str(self):
        """Return stack trace as string"""
        import traceback

        s = self.to_str()
        tb = getattr(self, '__traceback__', None)
        if tb:
            s += "\n" + "".join(traceback.format_tb(tb))

        if self._cause is not None:
            if hasattr(self._cause, 'trace_to_str'):
                s += "\n  Caused by: " + self._cause.trace_to_str()
            else:
                s += f"\n  Caused by: {type(self._cause).__name__}: {self._cause}"
        return s

    def __str__(self):
        return self.to_str()


class ArgErr(Err):
    """Argument error"""
    pass


class CastErr(Err):
    """Cast error - thrown when a compiled accessor cast fails"""
    pass


class UnknownTypeErr(Err):
    """Unknown type error"""
    pass


class UnknownSlotErr(Err):
    """Unknown slot error - thrown when a checked slot lookup fails"""
    pass


class UnknownFacetErr(Err):
    """Unknown facet error - thrown when a checked facet lookup fails"""
    pass


class ConversionErr(Err):
    """Value cannot be coerced to the required parameter type"""

    @staticmethod
    def make_for(value, target, cause=None):
        from .Types import type_name
        src = "null" if value is None else type_name(type(value))
        return ConversionErr(f"Cannot convert {src} to {type_name(target)}", cause)


class AccessorBuildErr(Err):
    """No such field/property, or accessor code generation failed"""
    pass


class NoMatchingOverloadErr(Err):
    """No arity and type compatible constructor or method"""

    @staticmethod
    def make_for(cls, name, argc):
        from .Types import type_name
        return NoMatchingOverloadErr(
            f"No matching overload: {type_name(cls)}.{name} with {argc} argument(s)")


class InvocationErr(Err):
    """Underlying call raised - original failure is the cause"""
    pass
