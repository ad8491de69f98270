#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import functools

from .Cache import CacheMap
from .Err import AccessorBuildErr, ArgErr, InvocationErr, NoMatchingOverloadErr
from .Log import Log
from .Sentinel import NoResult
from .Slot import Scope
from .Types import is_assignable, signature_of, type_name


class InvokeKind:
    """First element of an invoker cache key."""
    Ctor = "ctor"
    Method = "method"
    Static = "static"


# Scope of candidates for invoke_static_method
_STATIC_SCOPE = Scope.Public | Scope.NonPublic | Scope.Static


class _Invoker:
    """Compiled call site: fn plus how its arguments are passed."""

    __slots__ = ("fn", "boxed", "method")

    def __init__(self, fn, boxed, method):
        self.fn = fn
        self.boxed = boxed
        self.method = method

    def __call__(self, instance, args):
        if self.boxed:
            return self.fn(instance, args)
        return self.fn(instance, *args)


class InvokerFactory:
    """Constructs instances and invokes methods by name with tiered resolution.

    1. zero arguments: compiled parameterless constructor or call; a class
       without a usable parameterless constructor falls back to cls.__new__
    2. up to invoker.maxCompiledArity arguments: exact signature match on
       the argument classes, else the first candidate in declaration order
       whose parameters accept each argument, compiled with per-argument
       converters
    3. more arguments, or a fixed-arity invoker that fails to compile:
       compiled boxed-tuple invoker
    4. if building a compiled invoker fails, the call is made reflectively
       and nothing is cached

    Compiled invokers are cached under (kind, cls, name, argument classes).
    """

    def __init__(self, members, converter, compiler):
        self._members = members
        self._converter = converter
        self._compiler = compiler
        self._invokers = CacheMap("invokers")
        self._delegates = CacheMap("delegates")

    #########################################################################
    # Public API
    #########################################################################

    def create_instance(self, cls, *args):
        """Create an instance of cls with positional args.

        Raises:
            NoMatchingOverloadErr: No constructor accepts the arguments
            ConversionErr: An argument cannot be converted
            InvocationErr: The constructor raised
        """
        if not isinstance(cls, type):
            raise ArgErr.make(f"Expected a class, got {cls!r}")
        return self._invoke(InvokeKind.Ctor, cls, "__init__", None, args)

    def invoke_method(self, instance, name, *args):
        """Invoke a method by name on instance.

        Returns:
            Method result, NoResult if the method returns None by declaration
        """
        if instance is None:
            raise ArgErr.make("Target instance must not be None")
        if not name:
            raise ArgErr.make("Method name must not be empty")
        return self._invoke(InvokeKind.Method, type(instance), name, instance, args)

    def invoke_static_method(self, cls, name, *args):
        """Invoke a static or class method by name."""
        if not isinstance(cls, type):
            raise ArgErr.make(f"Expected a class, got {cls!r}")
        if not name:
            raise ArgErr.make("Method name must not be empty")
        return self._invoke(InvokeKind.Static, cls, name, None, args)

    def create_method_delegate(self, target, name, signature=None):
        """Get a cached bound callable for a method.

        Args:
            target: Instance for instance methods, class for static methods
            name: Reflective method name
            signature: Parameter types selecting an overload, None for the first

        The delegate is cached per declaring class, method name, signature
        and target instance identity.
        """
        if target is None or not name:
            raise ArgErr.make("Delegate target and name are required")
        static = isinstance(target, type)
        cls = target if static else type(target)
        sig = signature_of(signature)
        key = (cls, name, sig, None if static else id(target))

        def build():
            scope = _STATIC_SCOPE if static else Scope.All
            m = self._members.method(cls, name, sig, scope)
            if not m:
                raise NoMatchingOverloadErr.make_for(cls, name, len(sig) if sig else 0)
            return m.bind(cls, None if static else target)

        return self._delegates.get_or_build(key, build)

    def size(self):
        return self._invokers.size() + self._delegates.size()

    def clear(self):
        self._invokers.clear()
        self._delegates.clear()

    #########################################################################
    # Tiers
    #########################################################################

    def _invoke(self, kind, cls, name, instance, args):
        key = (kind, cls, name, tuple(type(a) for a in args))
        invoker = self._invokers.get(key, CacheMap.MISSING)
        if invoker is CacheMap.MISSING:
            if kind == InvokeKind.Ctor and not args:
                method, converters = self._zero_arg_ctor(cls), []
                if method is None:
                    invoker = self._invokers.get_or_build(key, lambda: self._default_instance(cls))
                    return invoker(instance, args)
            else:
                method, converters = self._resolve(kind, cls, name, args)
            try:
                invoker = self._invokers.get_or_build(
                    key, lambda: self._build(method, cls, converters))
            except Exception as e:
                Log.get("slotcache").debug(
                    f"Cannot compile invoker for {method.qname()}, using reflective call", e)
                return self._reflect_call(method, cls, instance, args, converters)
        return invoker(instance, args)

    def _zero_arg_ctor(self, cls):
        """Parameterless constructor of a concrete class, or None."""
        c = self._members.ctor(cls, ())
        if not c:
            c = self._first_match(self._members.ctors(cls), ())
        if not c or c.is_abstract():
            return None
        return c

    @staticmethod
    def _default_instance(cls):
        Log.get("slotcache").debug(f"Default instance fallback for {type_name(cls)}")
        qname = type_name(cls)

        def new_default(instance, args):
            try:
                return cls.__new__(cls)
            except Exception as e:
                raise InvocationErr.make(qname, e) from e
        return new_default

    def _build(self, method, cls, converters):
        max_arity = self._compiler.env().config_int("invoker.maxCompiledArity", 4)
        if len(converters) <= max_arity:
            try:
                return _Invoker(self._compiler.invoker(method, cls, converters), False, method)
            except AccessorBuildErr:
                raise
            except Exception as e:
                Log.get("slotcache").debug(
                    f"Cannot compile fixed-arity invoker for {method.qname()}, trying boxed", e)
        return _Invoker(self._compiler.boxed_invoker(method, cls, converters), True, method)

    def _reflect_call(self, method, cls, instance, args, converters):
        args = [a if c is None else c(a) for c, a in zip(converters, args)]
        try:
            result = method.invoke(cls, instance, args)
        except Exception as e:
            raise InvocationErr.make(method.qname(), e) from e
        return NoResult if method.is_void() else result

    #########################################################################
    # Overload resolution
    #########################################################################

    def _resolve(self, kind, cls, name, args):
        """Pick the method for args and the converter for each argument."""
        arg_types = tuple(type(a) for a in args)
        if kind == InvokeKind.Ctor:
            exact = self._members.ctor(cls, arg_types)
            candidates = self._members.ctors(cls)
        else:
            scope = _STATIC_SCOPE if kind == InvokeKind.Static else Scope.All
            exact = self._members.method(cls, name, arg_types, scope)
            candidates = self._members.methods(cls, name, scope)

        if exact:
            return exact, [None] * len(args)

        m = self._first_match(candidates, args)
        if not m:
            raise NoMatchingOverloadErr.make_for(cls, name, len(args))
        return m, self._converters(m, args)

    def _first_match(self, candidates, args):
        for m in candidates:
            if not m.accepts(len(args)):
                continue
            if all(self._compatible(a, t) for a, t in zip(args, m.param_types())):
                return m
        return None

    def _compatible(self, arg, param_type):
        return is_assignable(type(arg), param_type) or self._converter.can_convert(arg, param_type)

    def _converters(self, method, args):
        result = []
        for a, t in zip(args, method.param_types()):
            if is_assignable(type(a), t):
                result.append(None)
            else:
                result.append(functools.partial(self._converter.convert, target=t))
        return result
