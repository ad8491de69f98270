#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Accessor import AccessorFactory
from .Compiler import Compiler
from .FacetIndex import FacetIndex
from .Invoker import InvokerFactory
from .Log import Log
from .MemberCache import MemberCache
from .Metadata import Metadata
from .ParamConverter import ParamConverter
from .Slot import Scope
from .TypeResolver import TypeResolver


class ReflectCache:
    """Cache service owning every reflection cache.

    Lifecycle:
    - cur() lazily creates the process-wide instance
    - clear_all_caches() resets every cache entry to uncached
    - warmup() forces first-use compilation at a controlled time

    Tests construct their own instance with an injected Metadata so
    scans can be observed.
    """

    _cur = None

    def __init__(self, metadata=None, env=None):
        """Create a cache service.

        Args:
            metadata: Metadata scanner, defaults to Metadata()
            env: Env used for configuration, defaults to Env.cur()
        """
        self._metadata = metadata if metadata is not None else Metadata()
        self._compiler = Compiler(env)
        self._types = TypeResolver(self._metadata)
        self._members = MemberCache(self._metadata)
        self._facets = FacetIndex(self._metadata)
        self._converter = ParamConverter()
        self._accessors = AccessorFactory(self._members, self._compiler)
        self._invokers = InvokerFactory(self._members, self._converter, self._compiler)

    @staticmethod
    def cur():
        """Return the process-wide cache service."""
        if ReflectCache._cur is None:
            ReflectCache._cur = ReflectCache()
        return ReflectCache._cur

    #########################################################################
    # Components
    #########################################################################

    def metadata(self):
        return self._metadata

    def compiler(self):
        return self._compiler

    def types(self):
        return self._types

    def members(self):
        return self._members

    def facet_index(self):
        return self._facets

    def converter(self):
        return self._converter

    def accessors(self):
        return self._accessors

    def invokers(self):
        return self._invokers

    #########################################################################
    # Types and members
    #########################################################################

    def resolve(self, name, checked=False):
        return self._types.resolve(name, checked)

    def types_in(self, module, predicate=None):
        return self._types.types_in(module, predicate)

    def all_types(self, predicate=None):
        return self._types.all_types(predicate)

    def field(self, cls, name, scope=Scope.All, checked=False):
        return self._members.field(cls, name, scope, checked)

    def property(self, cls, name, scope=Scope.All, checked=False):
        return self._members.property(cls, name, scope, checked)

    def method(self, cls, name, signature=None, scope=Scope.All, checked=False):
        return self._members.method(cls, name, signature, scope, checked)

    def methods(self, cls, name, scope=Scope.All):
        return self._members.methods(cls, name, scope)

    def ctor(self, cls, signature=None, scope=Scope.All, checked=False):
        return self._members.ctor(cls, signature, scope, checked)

    def ctors(self, cls, scope=Scope.All):
        return self._members.ctors(cls, scope)

    def static_field_names(self, cls):
        return self._members.static_field_names(cls)

    def property_names(self, cls):
        return self._members.property_names(cls)

    def method_names(self, cls):
        return self._members.method_names(cls)

    #########################################################################
    # Facets
    #########################################################################

    def facets(self, target, facet_type=None, inherit=False):
        return self._facets.facets(target, facet_type, inherit)

    def facet(self, target, facet_type, inherit=False, checked=False):
        return self._facets.facet(target, facet_type, inherit, checked)

    def has_facet(self, target, facet_type, inherit=False):
        return self._facets.has_facet(target, facet_type, inherit)

    #########################################################################
    # Conversion, accessors and invocation
    #########################################################################

    def convert(self, value, target):
        return self._converter.convert(value, target)

    def can_convert(self, value, target):
        return self._converter.can_convert(value, target)

    def try_convert(self, value, target):
        return self._converter.try_convert(value, target)

    def create_getter(self, target_type, result_type, name):
        return self._accessors.create_getter(target_type, result_type, name)

    def create_setter(self, target_type, value_type, name):
        return self._accessors.create_setter(target_type, value_type, name)

    def create_instance(self, cls, *args):
        return self._invokers.create_instance(cls, *args)

    def invoke_method(self, instance, name, *args):
        return self._invokers.invoke_method(instance, name, *args)

    def invoke_static_method(self, cls, name, *args):
        return self._invokers.invoke_static_method(cls, name, *args)

    def create_method_delegate(self, target, name, signature=None):
        return self._invokers.create_method_delegate(target, name, signature)

    #########################################################################
    # Lifecycle
    #########################################################################

    def warmup(self):
        """Run the warmup routine; never raises.

        Returns:
            Number of warmup steps which succeeded
        """
        from .Warmup import Warmup
        return Warmup(self).run()

    def clear_all_caches(self):
        """Reset every cache; the next request of any key rescans metadata."""
        for c in self._caches():
            c.clear()
        Log.get("slotcache").debug("Cleared all reflection caches")

    def size(self):
        """Total number of entries across every cache."""
        return sum(c.size() for c in self._caches())

    def _caches(self):
        return (self._types, self._members, self._facets, self._accessors, self._invokers)
