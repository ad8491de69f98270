#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

# slotcache - cached runtime reflection and dynamic invocation

# Sentinels
from .Sentinel import NotFound, NoResult

# Reflection model
from .Slot import Scope, Slot, SlotFlags
from .Param import Param
from .Field import Field, Property
from .Method import Method
from .Facet import Facet, Obsolete, Serializable, Transient
from .Metadata import Metadata, ctor, method

# Caches
from .Cache import CacheMap
from .TypeResolver import TypeResolver
from .MemberCache import MemberCache
from .FacetIndex import FacetIndex
from .ParamConverter import ParamConverter
from .Accessor import AccessorFactory
from .Invoker import InvokerFactory
from .Compiler import Compiler
from .ReflectCache import ReflectCache

# Environment
from .Env import Env
from .Log import Log, LogLevel, LogRec

# Errors
from .Err import (Err, AccessorBuildErr, ArgErr, CastErr, ConversionErr, InvocationErr,
                  NoMatchingOverloadErr, UnknownFacetErr, UnknownSlotErr, UnknownTypeErr)


#############################################################################
# Process-wide API, delegating to ReflectCache.cur()
#############################################################################

def resolve(name, checked=False):
    return ReflectCache.cur().resolve(name, checked)


def field_of(cls, name, scope=Scope.All, checked=False):
    return ReflectCache.cur().field(cls, name, scope, checked)


def property_of(cls, name, scope=Scope.All, checked=False):
    """Look up a property; named property_of so the builtin stays unshadowed."""
    return ReflectCache.cur().property(cls, name, scope, checked)


def method_of(cls, name, signature=None, scope=Scope.All, checked=False):
    """Look up a method; named method_of since ``method`` is the overload decorator."""
    return ReflectCache.cur().method(cls, name, signature, scope, checked)


def ctor_of(cls, signature=None, scope=Scope.All, checked=False):
    """Look up a constructor; named ctor_of since ``ctor`` is the constructor decorator."""
    return ReflectCache.cur().ctor(cls, signature, scope, checked)


def facets(target, facet_type=None, inherit=False):
    return ReflectCache.cur().facets(target, facet_type, inherit)


def facet(target, facet_type, inherit=False, checked=False):
    return ReflectCache.cur().facet(target, facet_type, inherit, checked)


def has_facet(target, facet_type, inherit=False):
    return ReflectCache.cur().has_facet(target, facet_type, inherit)


def convert(value, target):
    return ReflectCache.cur().convert(value, target)


def can_convert(value, target):
    return ReflectCache.cur().can_convert(value, target)


def try_convert(value, target):
    return ReflectCache.cur().try_convert(value, target)


def create_getter(target_type, result_type, name):
    return ReflectCache.cur().create_getter(target_type, result_type, name)


def create_setter(target_type, value_type, name):
    return ReflectCache.cur().create_setter(target_type, value_type, name)


def create_instance(cls, *args):
    return ReflectCache.cur().create_instance(cls, *args)


def invoke_method(instance, name, *args):
    return ReflectCache.cur().invoke_method(instance, name, *args)


def invoke_static_method(cls, name, *args):
    return ReflectCache.cur().invoke_static_method(cls, name, *args)


def create_method_delegate(target, name, signature=None):
    return ReflectCache.cur().create_method_delegate(target, name, signature)


def warmup():
    return ReflectCache.cur().warmup()


def clear_all_caches():
    ReflectCache.cur().clear_all_caches()
