#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Slot import Slot, SlotFlags


class Method(Slot):
    """Method reflection - a method, static method, class method or constructor.

    Several Method objects may share one reflective name (overloads); each
    wraps its own Python callable, named by py_name on the declaring class.
    Constructors carry the Ctor flag: the ``__init__`` constructor invokes
    the class itself, ``@ctor`` factories invoke the factory.
    """

    def __init__(self, parent=None, name="", flags=0, returns=object, params=None,
                 func=None, py_name=None, facets=None):
        """Create a Method reflection object.

        Args:
            parent: Declaring class
            name: Reflective method name
            flags: Slot flags (SlotFlags values)
            returns: Return type (None for void)
            params: List of Param objects, receiver excluded
            func: Underlying plain function (unwrapped from static/classmethod)
            py_name: Attribute name on the class, defaults to name
            facets: Facets attached to the function
        """
        super().__init__(parent, name, flags, facets)
        self._returns = returns
        self._params = tuple(params) if params else ()
        self._func = func
        self._py_name = py_name if py_name is not None else name

    def is_method(self):
        return True

    def returns(self):
        return self._returns

    def is_void(self):
        return (self._flags & SlotFlags.Void) != 0

    def is_class_method(self):
        return (self._flags & SlotFlags.ClassMethod) != 0

    def params(self):
        return self._params

    def param_types(self):
        return tuple(p.type() for p in self._params)

    def arity(self):
        return len(self._params)

    def min_arity(self):
        return sum(1 for p in self._params if not p.has_default())

    def accepts(self, argc):
        """Return True if argc positional arguments can bind to this method."""
        return self.min_arity() <= argc <= self.arity()

    def func(self):
        return self._func

    def py_name(self):
        return self._py_name

    def is_init_ctor(self):
        return self.is_ctor() and self._py_name == "__init__"

    def bind(self, cls=None, instance=None):
        """Return the Python callable which performs this method's call.

        Args:
            cls: Class the call is made through (subclass for inherited
                 statics and constructors); defaults to the declaring class
            instance: Receiver for instance methods
        """
        cls = cls if cls is not None else self._parent
        if self.is_init_ctor():
            return cls
        if self.is_static() or self.is_ctor():
            return getattr(cls, self._py_name)
        if instance is None:
            from .Err import ArgErr
            raise ArgErr.make(f"Instance method {self.qname()} requires target object")
        return getattr(instance, self._py_name)

    def invoke(self, cls, instance, args):
        """Uncompiled reflective call used by the terminal fallback tier."""
        return self.bind(cls, instance)(*args)

    def signature(self):
        """Return signature string like 'Point.move(int, int) -> None'"""
        from .Types import type_name
        params = ", ".join(type_name(t) for t in self.param_types())
        ret = "None" if self.is_void() else type_name(self._returns)
        return f"{self.qname()}({params}) -> {ret}"

    def to_str(self):
        return self.signature()

    def _key(self):
        return (Method, self._parent, self._name, self._py_name, self.param_types())
