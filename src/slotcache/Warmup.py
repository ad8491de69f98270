#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import typing

from .Facet import Serializable
from .Log import Log
from .Metadata import ctor


@Serializable()
class WarmupTarget:
    """Reference type exercised by warmup(); one member per invocation tier."""

    x: int
    y: int
    label: typing.ClassVar[str] = "warmup"

    def __init__(self, x: int = 0, y: int = 0):
        self.x = x
        self.y = y

    @ctor
    def of_six(cls, a: int, b: int, c: int, d: int, e: int, f: int) -> "WarmupTarget":
        return cls(a + b + c, d + e + f)

    @property
    def total(self) -> int:
        return self.x + self.y

    def add(self, dx: int) -> int:
        return self.x + dx

    def move(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy

    def sum6(self, a: int, b: int, c: int, d: int, e: int, f: int) -> int:
        return a + b + c + d + e + f

    @staticmethod
    def scale(v: int, factor: int) -> int:
        return v * factor


class Warmup:
    """Runs every cached lookup and tiered invocation path once.

    Each step runs in isolation: a failure is logged at warn and the
    remaining steps still run.
    """

    def __init__(self, cache):
        self._cache = cache

    def steps(self):
        """Return the (name, fn) pairs run() executes in order."""
        c = self._cache
        t = WarmupTarget
        qname = f"{t.__module__}.{t.__qualname__}"
        return [
            ("resolve", lambda: c.resolve(qname, checked=True)),
            ("field", lambda: c.field(t, "x", checked=True)),
            ("property", lambda: c.property(t, "total", checked=True)),
            ("method", lambda: c.method(t, "add", checked=True)),
            ("ctor", lambda: c.ctor(t, (int, int), checked=True)),
            ("facets", lambda: c.has_facet(t, Serializable)),
            ("convert", lambda: c.convert("42", int)),
            ("getter", lambda: c.create_getter(t, int, "x")(t(1, 2))),
            ("setter", lambda: c.create_setter(t, int, "y")(t(), 3)),
            ("create_instance/0", lambda: c.create_instance(t)),
            ("create_instance/2", lambda: c.create_instance(t, 1, 2)),
            ("create_instance/6", lambda: c.create_instance(t, 1, 2, 3, 4, 5, 6)),
            ("invoke_method/1", lambda: c.invoke_method(t(1, 2), "add", 3)),
            ("invoke_method/void", lambda: c.invoke_method(t(), "move", 1, 1)),
            ("invoke_method/6", lambda: c.invoke_method(t(), "sum6", 1, 2, 3, 4, 5, 6)),
            ("invoke_static_method", lambda: c.invoke_static_method(t, "scale", 2, 3)),
            ("delegate", lambda: c.create_method_delegate(t(), "add")(1)),
        ]

    def run(self):
        """Run every step; never raises.

        Returns:
            Number of steps which succeeded
        """
        log = Log.get("slotcache")
        ok = 0
        for name, step in self.steps():
            try:
                step()
                ok += 1
            except Exception as e:
                log.warn(f"Warmup step failed: {name}", e)
        log.debug(f"Warmup complete: {ok} steps")
        return ok
