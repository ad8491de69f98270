#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import builtins
import importlib
import inspect
import sys
import types
import typing

from .Facet import Facet
from .Field import Field, Property
from .Log import Log
from .Method import Method
from .Param import Param
from .Sentinel import NotFound
from .Slot import Scope, SlotFlags
from .Types import NoneType


# Marker attributes set by the @ctor and @method decorators
_CTOR_ATTR = "__slot_ctor__"
_NAME_ATTR = "__slot_name__"

# Callables in a class body which are never reflected as methods
_SKIP_METHODS = {"__init__", "__new__", "__init_subclass__", "__class_getitem__", "__subclasshook__"}

# Descriptor types of builtin classes which behave like instance methods
_BUILTIN_METHOD_TYPES = (
    types.MethodDescriptorType,
    types.WrapperDescriptorType,
)


def ctor(fn):
    """Mark a factory as an additional constructor.

    Applies to classmethods and staticmethods; a plain function is turned
    into a classmethod::

        class Widget:
            def __init__(self): ...

            @ctor
            def from_size(cls, size: int) -> "Widget": ...
    """
    if isinstance(fn, (staticmethod, classmethod)):
        setattr(fn.__func__, _CTOR_ATTR, True)
        return fn
    setattr(fn, _CTOR_ATTR, True)
    return classmethod(fn)


def method(name):
    """Expose a function as an overload of the reflective method name.

    Python has one attribute per name, so overloads are written as
    separately named functions sharing a reflective name::

        class Calc:
            @method("add")
            def add_int(self, a: int, b: int) -> int: ...

            @method("add")
            def add_str(self, a: str, b: str) -> str: ...
    """
    def decorate(fn):
        target = fn.__func__ if isinstance(fn, (staticmethod, classmethod)) else fn
        setattr(target, _NAME_ATTR, name)
        return fn
    return decorate


def _hints(obj):
    """Resolve annotations to types, keeping Annotated/ClassVar/Final.

    Unresolvable forward references degrade to object.
    """
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except Exception:
        raw = getattr(obj, '__annotations__', None) or {}
        return {k: (object if isinstance(v, str) else v) for k, v in raw.items()}


def _own_annotations(klass):
    try:
        return inspect.get_annotations(klass)
    except Exception:
        return klass.__dict__.get('__annotations__', {})


def _unwrap_field_type(hint):
    """Split a field annotation into (type, is_static, is_readonly, facets)."""
    is_static = False
    is_readonly = False
    facets = []
    changed = True
    while changed:
        changed = False
        origin = typing.get_origin(hint)
        if origin is typing.Annotated:
            args = typing.get_args(hint)
            facets.extend(a for a in args[1:] if isinstance(a, Facet))
            hint = args[0]
            changed = True
        elif origin is typing.ClassVar or hint is typing.ClassVar:
            is_static = True
            args = typing.get_args(hint)
            hint = args[0] if args else object
            changed = True
        elif origin is typing.Final or hint is typing.Final:
            is_readonly = True
            args = typing.get_args(hint)
            hint = args[0] if args else object
            changed = True
    return hint, is_static, is_readonly, facets


def _visibility(name):
    return SlotFlags.Public if Scope.is_public_name(name) else SlotFlags.Private


def _is_frozen(cls):
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and getattr(params, "frozen", False))


class Metadata:
    """Underlying metadata scanner.

    Every method here performs a fresh ``inspect`` scan; the caches in
    TypeResolver, MemberCache and FacetIndex call into it at most once
    per key. Subclass it to observe or alter scanning (tests count calls).
    """

    #########################################################################
    # Types
    #########################################################################

    def find_type(self, name):
        """Find a class by name without caching.

        Unqualified names try builtins first, qualified names try a direct
        module import, then every loaded module is scanned in registration
        order.

        Returns:
            Class or NotFound
        """
        if "." not in name:
            t = getattr(builtins, name, None)
            if isinstance(t, type):
                return t
        else:
            t = self._find_qualified(name)
            if t is not NotFound:
                return t
        return self._scan_modules(name)

    def _find_qualified(self, name):
        parts = name.split(".")
        for i in range(len(parts) - 1, 0, -1):
            mod_name = ".".join(parts[:i])
            module = sys.modules.get(mod_name)
            if module is None:
                try:
                    module = importlib.import_module(mod_name)
                except Exception as e:
                    Log.get("slotcache").debug(f"Cannot import {mod_name} for {name}", e)
                    continue
            t = self._walk(module, parts[i:])
            if isinstance(t, type):
                return t
        return NotFound

    @staticmethod
    def _walk(obj, path):
        for attr in path:
            try:
                obj = getattr(obj, attr)
            except Exception:
                return NotFound
        return obj

    def _scan_modules(self, name):
        path = name.split(".")
        for mod_name, module in list(sys.modules.items()):
            if module is None:
                continue
            candidates = [path]
            prefix = mod_name + "."
            if name.startswith(prefix):
                candidates.append(name[len(prefix):].split("."))
            for candidate in candidates:
                t = self._walk(module, candidate)
                if not isinstance(t, type):
                    continue
                if t.__qualname__ == name or f"{t.__module__}.{t.__qualname__}" == name:
                    return t
        return NotFound

    def types_in(self, module, predicate=None):
        """List the classes defined in a module, in definition order.

        Args:
            module: Module object
            predicate: Optional filter function taking a class

        Returns:
            List of classes
        """
        try:
            members = list(vars(module).values())
        except TypeError as e:
            from .Log import Log
            Log.get("slotcache").err(f"Cannot read types of {module!r}", e)
            return []
        mod_name = getattr(module, "__name__", None)
        result = []
        for v in members:
            if not isinstance(v, type) or v.__module__ != mod_name:
                continue
            if predicate is None or predicate(v):
                result.append(v)
        return result

    def all_types(self, predicate=None):
        """Iterate the classes of every loaded module."""
        for module in list(sys.modules.values()):
            if module is None:
                continue
            for t in self.types_in(module, predicate):
                yield t

    #########################################################################
    # Fields and Properties
    #########################################################################

    def find_field(self, cls, name, scope=Scope.All):
        """Find a field by name, searching the MRO from the most derived class.

        Returns:
            Field or NotFound
        """
        for klass in cls.__mro__:
            if klass is object:
                break
            field = self._field_in(cls, klass, name)
            if field is None:
                continue
            if field is NotFound:
                return NotFound
            return field if Scope.matches(scope, field.flags()) else NotFound
        return NotFound

    def _field_in(self, cls, klass, name):
        """Field declared directly on klass.

        Returns None if klass does not declare name, NotFound if it
        declares name as something other than a field.
        """
        own = _own_annotations(klass)
        if name in own:
            hint = _hints(klass).get(name, object)
            type_, is_static, is_readonly, facets = _unwrap_field_type(hint)
            flags = _visibility(name)
            if is_static:
                flags |= SlotFlags.Static
            if is_readonly or (not is_static and _is_frozen(cls)):
                flags |= SlotFlags.Readonly
            return Field(klass, name, flags, type_, facets)

        if name not in klass.__dict__:
            return None
        raw = klass.__dict__[name]
        if isinstance(raw, types.MemberDescriptorType):
            return Field(klass, name, _visibility(name), object)
        if isinstance(raw, (property, staticmethod, classmethod, type)) or callable(raw) \
                or hasattr(type(raw), "__get__"):
            return NotFound
        return Field(klass, name, _visibility(name) | SlotFlags.Static, type(raw))

    def fields(self, cls, scope=Scope.All):
        """All fields visible on cls, base classes first."""
        result = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            names = list(_own_annotations(klass))
            names += [n for n in klass.__dict__ if n not in names]
            for name in names:
                if name.startswith("__") and name.endswith("__"):
                    continue
                field = self._field_in(cls, klass, name)
                if field is None:
                    continue
                if field is NotFound:
                    result.pop(name, None)
                    continue
                result[name] = field
        return [f for f in result.values() if Scope.matches(scope, f.flags())]

    def find_property(self, cls, name, scope=Scope.All):
        """Find a property descriptor by name.

        Returns:
            Property or NotFound
        """
        for klass in cls.__mro__:
            if name not in klass.__dict__:
                continue
            raw = klass.__dict__[name]
            if not isinstance(raw, property):
                return NotFound
            prop = self._make_property(klass, name, raw)
            return prop if Scope.matches(scope, prop.flags()) else NotFound
        return NotFound

    def _make_property(self, klass, name, raw):
        type_ = object
        if raw.fget is not None:
            type_ = _hints(raw.fget).get("return", object)
        elif raw.fset is not None:
            hints = _hints(raw.fset)
            params = [p for p in hints if p != "return"]
            if params:
                type_ = hints[params[-1]]
        flags = _visibility(name)
        if raw.fget is not None:
            flags |= SlotFlags.Getter
        if raw.fset is not None:
            flags |= SlotFlags.Setter
        return Property(klass, name, flags, type_, raw, Facet.declared(raw))

    def properties(self, cls, scope=Scope.All):
        result = {}
        for klass in reversed(cls.__mro__):
            for name, raw in klass.__dict__.items():
                if isinstance(raw, property):
                    result[name] = self._make_property(klass, name, raw)
                elif name in result:
                    del result[name]
        return [p for p in result.values() if Scope.matches(scope, p.flags())]

    #########################################################################
    # Methods and Constructors
    #########################################################################

    def find_methods(self, cls, name, scope=Scope.All):
        """Find every overload of a reflective method name.

        Overrides hide the base class definition of the same attribute.
        The result is in declaration order, most derived class first.
        """
        return [m for m in self.methods(cls, scope) if m.name() == name]

    def methods(self, cls, scope=Scope.All):
        """All methods of cls, constructors excluded."""
        result = []
        seen = set()
        for klass in cls.__mro__:
            for attr, raw in klass.__dict__.items():
                if attr in seen:
                    continue
                seen.add(attr)
                m = self._make_method(klass, attr, raw)
                if m is None or m.is_ctor():
                    continue
                if Scope.matches(scope, m.flags()):
                    result.append(m)
        return result

    def find_ctors(self, cls, scope=Scope.All):
        """Find constructors: __init__ first, then @ctor factories.

        Only visibility bits of the scope apply to constructors.
        """
        vis = scope | Scope.Instance | Scope.Static
        result = []
        init = self._make_init_ctor(cls)
        if init is not None and Scope.matches(vis, init.flags()):
            result.append(init)
        for attr, raw in cls.__dict__.items():
            if attr in _SKIP_METHODS:
                continue
            m = self._make_method(cls, attr, raw)
            if m is not None and m.is_ctor() and Scope.matches(vis, m.flags()):
                result.append(m)
        return result

    def _make_init_ctor(self, cls):
        for klass in cls.__mro__:
            if "__init__" in klass.__dict__ or "__new__" in klass.__dict__:
                break
        else:
            klass = object

        flags = SlotFlags.Public | SlotFlags.Ctor
        if inspect.isabstract(cls):
            flags |= SlotFlags.Abstract

        init = klass.__dict__.get("__init__")
        if klass is object or not inspect.isfunction(init):
            # object.__init__ or a builtin initializer
            params = []
            if klass is not object:
                try:
                    params = self._params(inspect.signature(cls), {}, skip_first=False)
                except (ValueError, TypeError):
                    params = []
            return Method(cls, "__init__", flags, cls, params, None, "__init__")

        hints = _hints(init)
        params = self._params(inspect.signature(init), hints, skip_first=True)
        return Method(cls, "__init__", flags, cls, params, init, "__init__",
                      Facet.declared(init))

    def _make_method(self, klass, attr, raw):
        """Build a Method for a class body entry, None if it is not a method."""
        if attr in _SKIP_METHODS:
            return None
        flags = 0
        if isinstance(raw, staticmethod):
            func = raw.__func__
            flags |= SlotFlags.Static
            skip_first = False
        elif isinstance(raw, classmethod):
            func = raw.__func__
            flags |= SlotFlags.Static | SlotFlags.ClassMethod
            skip_first = True
        elif inspect.isfunction(raw):
            func = raw
            skip_first = True
        elif isinstance(raw, _BUILTIN_METHOD_TYPES):
            func = raw
            skip_first = True
        else:
            return None

        name = getattr(func, _NAME_ATTR, attr)
        flags |= _visibility(name)
        if getattr(func, _CTOR_ATTR, False):
            flags |= SlotFlags.Ctor
        if getattr(func, "__isabstractmethod__", False):
            flags |= SlotFlags.Abstract

        try:
            sig = inspect.signature(func)
        except (ValueError, TypeError):
            return Method(klass, name, flags, object, [], func, attr)

        hints = _hints(func) if inspect.isfunction(func) else {}
        params = self._params(sig, hints, skip_first)
        returns = object
        if "return" in hints:
            returns = hints["return"]
            if returns is None or returns is NoneType:
                flags |= SlotFlags.Void
                returns = None
        elif sig.return_annotation is None:
            flags |= SlotFlags.Void
            returns = None
        return Method(klass, name, flags, returns, params, func, attr, Facet.declared(func))

    def _params(self, sig, hints, skip_first):
        params = []
        items = list(sig.parameters.values())
        if skip_first and items and items[0].kind in (
                inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            items = items[1:]
        for p in items:
            if p.kind not in (inspect.Parameter.POSITIONAL_ONLY,
                              inspect.Parameter.POSITIONAL_OR_KEYWORD):
                break
            type_ = hints.get(p.name, object)
            if typing.get_origin(type_) is typing.Annotated:
                type_ = typing.get_args(type_)[0]
            has_default = p.default is not inspect.Parameter.empty
            params.append(Param(p.name, type_, has_default,
                                p.default if has_default else None))
        return params

    #########################################################################
    # Facets
    #########################################################################

    def find_facets(self, target, facet_type=None, inherit=False):
        """Scan facets on a class or slot.

        Args:
            target: Class or Slot
            facet_type: Facet subclass to filter by, None for all
            inherit: Include inheritable facets of base classes/overridden slots

        Returns:
            List of facet instances, most derived declaration first
        """
        if isinstance(target, type):
            found = list(Facet.declared(target))
            if inherit:
                for klass in target.__mro__[1:]:
                    found.extend(f for f in Facet.declared(klass) if f.inherited)
        else:
            found = list(target.declared_facets())
            if inherit and target.parent() is not None:
                for klass in target.parent().__mro__[1:]:
                    found.extend(f for f in self._slot_facets_in(klass, target) if f.inherited)
        if facet_type is None:
            return found
        return [f for f in found if isinstance(f, facet_type)]

    def _slot_facets_in(self, klass, slot):
        if slot.is_field():
            hint = _own_annotations(klass).get(slot.name())
            if hint is None:
                return ()
            return tuple(_unwrap_field_type(_hints(klass).get(slot.name(), object))[3])
        if slot.is_property():
            raw = klass.__dict__.get(slot.name())
            return Facet.declared(raw) if isinstance(raw, property) else ()
        if slot.is_method():
            raw = klass.__dict__.get(slot.py_name())
            if raw is None:
                return ()
            return Facet.declared(raw)
        return ()

    #########################################################################
    # Member names
    #########################################################################

    def static_field_names(self, cls):
        return [f.name() for f in self.fields(cls, Scope.PublicStatic)]

    def property_names(self, cls):
        return [p.name() for p in self.properties(cls, Scope.PublicInstance)]

    def method_names(self, cls):
        names = []
        for m in self.methods(cls, Scope.PublicInstance):
            name = m.name()
            if name.startswith("__") and name.endswith("__"):
                continue
            if name not in names:
                names.append(name)
        return names
