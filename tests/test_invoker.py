"""Tests for tiered construction and method invocation."""

import pytest

from slotcache import (ArgErr, ConversionErr, InvocationErr, NoMatchingOverloadErr, NoResult,
                       create_instance, invoke_method, invoke_static_method)
from slotcache.Invoker import InvokeKind

from models import AdvancedCalc, Calc, Color, Config, Painter, Point, Point3, Shape, Sink, Widget


class TestOverloadSelection:
    def test_widget_ctors(self, cache):
        assert cache.create_instance(Widget).made_by == "()"
        assert cache.create_instance(Widget, 5).made_by == "(int)"
        w = cache.create_instance(Widget, 5, "x")
        assert w.made_by == "(int,str)"
        assert (w.size, w.name) == (5, "x")

    def test_numeric_compatibility(self, cache):
        """A float argument still resolves to the (int) constructor."""
        w = cache.create_instance(Widget, 5.0)
        assert w.made_by == "(int)"
        assert w.size == 5 and type(w.size) is int

    def test_convertible_string_argument(self, cache):
        w = cache.create_instance(Widget, "7")
        assert w.made_by == "(int)"
        assert w.size == 7

    def test_method_overloads(self, cache):
        c = Calc()
        assert cache.invoke_method(c, "add", 1, 2) == 3
        assert cache.invoke_method(c, "add", "a", "b") == "ab"
        assert cache.invoke_method(c, "add", 1.0, 2) == 3

    def test_declaration_order_breaks_ties(self, cache):
        """Both overloads accept two strings convertible to int; exact match wins first."""
        assert cache.invoke_method(Calc(), "add", "1", "2") == "12"

    def test_default_parameters(self, cache):
        c = Calc()
        assert cache.invoke_method(c, "scaled", 1.5) == 3.0
        assert cache.invoke_method(c, "scaled", 1.5, 3) == 4.5
        assert cache.create_instance(Point3, 1, 2).z == 0

    def test_enum_argument(self, cache):
        p = Painter()
        assert cache.invoke_method(p, "paint", "green") is Color.GREEN
        assert cache.create_instance(Painter, "GREEN").color is Color.GREEN

    def test_optional_argument(self, cache):
        p = Painter()
        assert cache.invoke_method(p, "tint", None) is None
        assert cache.invoke_method(p, "tint", 2) == 2

    def test_number_does_not_match_bytes(self, cache):
        """A bytes parameter declared first does not capture a bool or int."""
        assert cache.invoke_method(Sink(), "put", True) == "int:True"
        assert cache.invoke_method(Sink(), "put", 5) == "int:5"
        assert cache.invoke_method(Sink(), "put", b"ab") == "bytes:b'ab'"

    def test_override_dispatch(self, cache):
        assert cache.invoke_method(AdvancedCalc(), "sum6", 1, 1, 1, 1, 1, 1) == 106

    def test_inherited_method(self, cache):
        assert cache.invoke_method(AdvancedCalc(), "add", 2, 3) == 5


class TestTiers:
    def test_zero_arg_compiled(self, cache):
        c = cache.create_instance(Calc)
        assert isinstance(c, Calc) and c.total == 0

    def test_zero_arg_default_instance(self, cache):
        """A class without a parameterless constructor is created uninitialized."""
        c = cache.create_instance(Config)
        assert isinstance(c, Config)
        assert not hasattr(c, "path")

    def test_abstract_class(self, cache):
        with pytest.raises(InvocationErr) as e:
            cache.create_instance(Shape)
        assert isinstance(e.value.cause(), TypeError)

    def test_low_arity(self, cache):
        p = cache.create_instance(Point, 3, 4)
        assert p == Point(3, 4)

    def test_high_arity_method(self, cache):
        """Six parameters go through the boxed invoker."""
        assert cache.invoke_method(Calc(), "sum6", 1, 2, 3, 4, 5, 6) == 21
        assert cache.invoke_method(Calc(), "sum6", 1, 2, 3, 4, 5, 6) == 21
        key = (InvokeKind.Method, Calc, "sum6", (int,) * 6)
        assert cache.invokers()._invokers.get(key).boxed

    def test_high_arity_with_conversion(self, cache):
        assert cache.invoke_method(Calc(), "weighted", 1, 1, 1, 1, 1, "2.5") == 12.5
        assert cache.invoke_method(Calc(), "weighted", 1, 1, 1, 1, 1) == 5.0

    def test_max_compiled_arity_config(self, cache, monkeypatch):
        monkeypatch.setenv("SLOTCACHE_INVOKER_MAXCOMPILEDARITY", "6")
        assert cache.invoke_method(Calc(), "sum6", 1, 2, 3, 4, 5, 6) == 21
        key = (InvokeKind.Method, Calc, "sum6", (int,) * 6)
        assert not cache.invokers()._invokers.get(key).boxed

    def test_void_returns_no_result(self, cache):
        c = Calc()
        assert cache.invoke_method(c, "accumulate", 4) is NoResult
        assert cache.invoke_method(c, "accumulate", 4) is NoResult
        assert c.total == 8
        p = Point(0, 0)
        assert cache.invoke_method(p, "move", 1, 2) is NoResult
        assert p == Point(1, 2)

    def test_static_methods(self, cache):
        assert cache.invoke_static_method(Calc, "twice", 21) == 42
        assert isinstance(cache.invoke_static_method(Calc, "zero"), Calc)
        assert cache.invoke_static_method(AdvancedCalc, "zero").__class__ is AdvancedCalc

    def test_static_through_instance(self, cache):
        assert cache.invoke_method(Calc(), "twice", 4) == 8

    def test_instance_method_is_not_static(self, cache):
        with pytest.raises(NoMatchingOverloadErr):
            cache.invoke_static_method(Calc, "sum6", 1, 2, 3, 4, 5, 6)


class TestFallback:
    def test_codegen_disabled(self, cache, monkeypatch, log_records):
        """Every call succeeds reflectively and nothing is cached."""
        monkeypatch.setenv("SLOTCACHE_CODEGEN_ENABLED", "false")
        assert cache.create_instance(Widget, 5).made_by == "(int)"
        assert cache.invoke_method(Calc(), "add", 1, "2") == 3
        assert cache.invoke_method(Calc(), "sum6", 1, 2, 3, 4, 5, 6) == 21
        assert cache.invoke_method(Calc(), "accumulate", 1) is NoResult
        assert cache.invoke_static_method(Calc, "twice", 2) == 4
        assert cache.create_instance(Calc).total == 0
        assert cache.invokers().size() == 0
        assert any("using reflective call" in r.msg() for r in log_records)

    def test_fallback_wraps_errors(self, cache, monkeypatch):
        monkeypatch.setenv("SLOTCACHE_CODEGEN_ENABLED", "false")
        with pytest.raises(InvocationErr):
            cache.invoke_method(Calc(), "fail")

    def test_boxed_when_fixed_arity_fails(self, cache, monkeypatch, log_records):
        def broken(*args):
            raise RuntimeError("cannot compile")
        monkeypatch.setattr(cache.compiler(), "invoker", broken)

        assert cache.invoke_method(Calc(), "add", 1, 2) == 3
        key = (InvokeKind.Method, Calc, "add", (int, int))
        assert cache.invokers()._invokers.get(key).boxed
        assert any("trying boxed" in r.msg() for r in log_records)
        assert not any("using reflective call" in r.msg() for r in log_records)

    def test_retries_compilation(self, cache, monkeypatch):
        monkeypatch.setenv("SLOTCACHE_CODEGEN_ENABLED", "false")
        cache.invoke_method(Calc(), "twice", 1)
        monkeypatch.setenv("SLOTCACHE_CODEGEN_ENABLED", "true")
        cache.invoke_method(Calc(), "twice", 1)
        assert cache.invokers().size() == 1


class TestErrors:
    def test_invocation_err(self, cache):
        with pytest.raises(InvocationErr) as e:
            cache.invoke_method(Calc(), "fail")
        assert isinstance(e.value.cause(), ValueError)
        assert e.value.__cause__ is e.value.cause()

    def test_no_matching_overload(self, cache):
        with pytest.raises(NoMatchingOverloadErr) as e:
            cache.create_instance(Widget, 1, 2, 3)
        assert "__init__" in e.value.msg()
        assert "3 argument(s)" in e.value.msg()

        with pytest.raises(NoMatchingOverloadErr) as e:
            cache.invoke_method(Calc(), "nope", 1)
        assert "nope" in e.value.msg()

    def test_incompatible_argument(self, cache):
        with pytest.raises(NoMatchingOverloadErr):
            cache.create_instance(Widget, "abc")

    def test_conversion_err_at_call(self, cache):
        """A cached call site whose converter rejects a later value."""
        assert cache.create_instance(Widget, "7").size == 7
        with pytest.raises(ConversionErr):
            cache.create_instance(Widget, "abc")

    def test_bad_args(self, cache):
        with pytest.raises(ArgErr):
            cache.invoke_method(None, "add")
        with pytest.raises(ArgErr):
            cache.create_instance("Widget")
        with pytest.raises(ArgErr):
            cache.invoke_static_method(Calc, "")


class TestInvokerCaching:
    def test_call_site_cached_by_argument_types(self, cache, metadata):
        cache.create_instance(Widget, 1)
        scans = metadata.total()
        cache.create_instance(Widget, 2)
        cache.create_instance(Widget, 3)
        assert metadata.total() == scans
        assert cache.invokers().size() == 1
        cache.create_instance(Widget, 1.5)
        assert cache.invokers().size() == 2

    def test_clear_all_caches(self, cache, metadata):
        cache.create_instance(Widget, 1, "a")
        scans = metadata.total()
        cache.clear_all_caches()
        assert cache.size() == 0
        cache.create_instance(Widget, 1, "a")
        assert metadata.total() == 2 * scans


class TestDelegates:
    def test_instance_delegate(self, cache):
        c = Calc()
        fn = cache.create_method_delegate(c, "accumulate")
        fn(5)
        assert c.total == 5
        assert cache.create_method_delegate(c, "accumulate") is fn
        assert cache.create_method_delegate(Calc(), "accumulate") is not fn

    def test_overload_delegate(self, cache):
        fn = cache.create_method_delegate(Calc(), "add", (str, str))
        assert fn("a", "b") == "ab"

    def test_static_delegate(self, cache):
        assert cache.create_method_delegate(Calc, "twice")(3) == 6

    def test_missing(self, cache):
        with pytest.raises(NoMatchingOverloadErr):
            cache.create_method_delegate(Calc(), "nope")


class TestModuleApi:
    def test_process_wide(self):
        assert create_instance(Point, 1, 2) == Point(1, 2)
        assert invoke_method(Calc(), "add", 2, 2) == 4
        assert invoke_static_method(Calc, "twice", 5) == 10
