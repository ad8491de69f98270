#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import keyword

from .Env import Env
from .Err import AccessorBuildErr, InvocationErr
from .Sentinel import NoResult


def _is_simple_name(name):
    return name.isidentifier() and not keyword.iskeyword(name)


class Compiler:
    """Generates accessor and invoker functions from Python source text.

    Each function is compiled once with compile()/exec inside a factory
    function whose parameters become the generated function's closure
    variables, the same way dataclasses builds __init__ and __repr__.
    """

    def __init__(self, env=None):
        self._env = env

    def env(self):
        return self._env if self._env is not None else Env.cur()

    def enabled(self):
        return self.env().config_bool("codegen.enabled", True)

    def _check_enabled(self, what):
        if not self.enabled():
            raise AccessorBuildErr.make(f"Code generation disabled: {what}")

    #########################################################################
    # Accessors
    #########################################################################

    def getter(self, slot, owner, cast=None):
        """Compile obj -> value for a field or property.

        Args:
            slot: Field or Property
            owner: Class static members are read from
            cast: Optional function applied to the read value
        """
        self._check_enabled(slot.qname())
        src = "_owner" if slot.is_static() else "obj"
        read = self._attr(src, slot.name())
        expr = f"_cast({read})" if cast is not None else read
        return self._make(
            slot.qname(), "get", ["obj"], [f"return {expr}"],
            {"_owner": owner, "_cast": cast, "_name": slot.name()})

    def setter(self, slot, owner, cast=None):
        """Compile (obj, value) -> None for a field or property."""
        self._check_enabled(slot.qname())
        src = "_owner" if slot.is_static() else "obj"
        val = "_cast(value)" if cast is not None else "value"
        if _is_simple_name(slot.name()):
            body = [f"{src}.{slot.name()} = {val}"]
        else:
            body = [f"setattr({src}, _name, {val})"]
        return self._make(
            slot.qname(), "set", ["obj", "value"], body,
            {"_owner": owner, "_cast": cast, "_name": slot.name()})

    #########################################################################
    # Invokers
    #########################################################################

    def invoker(self, method, cls, converters):
        """Compile a fixed-arity invoker (obj, a0, ..., aN-1) -> result.

        Args:
            method: Method or constructor to call
            cls: Class the call goes through (constructors, statics)
            converters: One function or None per argument, applied before the call
        """
        self._check_enabled(method.qname())
        n = len(converters)
        args = [f"a{i}" for i in range(n)]
        body = [f"a{i} = _c{i}(a{i})" for i, c in enumerate(converters) if c is not None]
        body += self._call_body(method, ", ".join(args))
        locals_ = self._call_locals(method, cls)
        for i, c in enumerate(converters):
            locals_[f"_c{i}"] = c
        return self._make(method.qname(), "invoke", ["obj"] + args, body, locals_)

    def boxed_invoker(self, method, cls, converters):
        """Compile an invoker (obj, args) -> result taking a boxed argument tuple."""
        self._check_enabled(method.qname())
        body = [
            "if len(args) != _argc:",
            "    raise _ArgErr.make(f'Expected {_argc} arguments, got {len(args)}')",
            "args = [a if c is None else c(a) for c, a in zip(_convs, args)]",
        ]
        body += self._call_body(method, "*args")
        locals_ = self._call_locals(method, cls)
        from .Err import ArgErr
        locals_.update({"_convs": tuple(converters), "_argc": len(converters), "_ArgErr": ArgErr})
        return self._make(method.qname(), "invoke_boxed", ["obj", "args"], body, locals_)

    def _call_body(self, method, args):
        if method.is_init_ctor() or method.is_static() or method.is_ctor():
            call = f"_target({args})"
        elif _is_simple_name(method.py_name()):
            call = f"obj.{method.py_name()}({args})"
        else:
            call = f"getattr(obj, _py_name)({args})"
        body = [
            "try:",
            f"    _r = {call}",
            "except Exception as e:",
            "    raise _InvocationErr.make(_qname, e) from e",
        ]
        body.append("return _NoResult" if method.is_void() else "return _r")
        return body

    @staticmethod
    def _call_locals(method, cls):
        target = None
        if method.is_init_ctor() or method.is_static() or method.is_ctor():
            target = method.bind(cls)
        return {
            "_target": target,
            "_py_name": method.py_name(),
            "_qname": method.qname(),
            "_InvocationErr": InvocationErr,
            "_NoResult": NoResult,
        }

    #########################################################################
    # Codegen
    #########################################################################

    @staticmethod
    def _attr(src, name):
        if _is_simple_name(name):
            return f"{src}.{name}"
        return f"getattr({src}, _name)"

    @staticmethod
    def _make(qname, name, params, body, locals_):
        """Compile body into a function named name, closing over locals_."""
        local_names = ", ".join(locals_.keys())
        lines = [f"def __create_fn__({local_names}):",
                 f"    def {name}({', '.join(params)}):"]
        lines += [f"        {line}" for line in body]
        lines.append(f"    return {name}")
        src = "\n".join(lines) + "\n"

        ns = {}
        exec(compile(src, f"<slotcache {qname}.{name}>", "exec"), {}, ns)
        fn = ns["__create_fn__"](**locals_)
        fn.__qualname__ = f"{qname}.<{name}>"
        return fn
