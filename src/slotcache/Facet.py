#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class Facet:
    """Base class for facets (annotations/metadata on types and slots).

    Facet instances attach themselves when used as decorators::

        @Serializable()
        class Point: ...

        class Point:
            @Obsolete("use move_to")
            def move(self, dx: int, dy: int) -> None: ...

    Fields carry facets through ``typing.Annotated`` metadata::

        class Point:
            x: Annotated[int, Transient()]

    Subclasses set ``inherited = False`` to keep the facet off subclasses
    and overriding methods when lookups ask for inherited facets.
    """

    inherited = True

    # Attribute holding the facets declared directly on a class or function
    ATTR = "__facets__"

    def __call__(self, target):
        Facet.attach(target, self)
        return target

    @staticmethod
    def attach(target, facet):
        """Attach facet to a class, function, property, static or class method."""
        holder = Facet._holder(target)
        if isinstance(holder, type):
            existing = holder.__dict__.get(Facet.ATTR, ())
        else:
            existing = getattr(holder, Facet.ATTR, ())
        setattr(holder, Facet.ATTR, tuple(existing) + (facet,))

    @staticmethod
    def declared(target):
        """Return facets declared directly on target, never inherited ones."""
        holder = Facet._holder(target)
        if holder is None:
            return ()
        if isinstance(holder, type):
            return tuple(holder.__dict__.get(Facet.ATTR, ()))
        return tuple(getattr(holder, Facet.ATTR, ()))

    @staticmethod
    def _holder(target):
        # property objects are immutable, facets live on the getter
        if isinstance(target, property):
            return target.fget
        if isinstance(target, (staticmethod, classmethod)):
            return target.__func__
        return target

    def is_immutable(self):
        return True

    def _vals(self):
        return tuple(sorted(vars(self).items()))

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        return self._vals() == other._vals()

    def __hash__(self):
        return hash((type(self), tuple(repr(v) for v in self._vals())))

    def __repr__(self):
        vals = ", ".join(f"{k}={v!r}" for k, v in self._vals())
        return f"@{type(self).__name__}({vals})"


class Transient(Facet):
    """Marker facet for fields excluded from state snapshots."""
    pass


class Obsolete(Facet):
    """Marks a type or slot as obsolete."""

    def __init__(self, msg=""):
        self.msg = msg


class Serializable(Facet):
    """Marks a type as serializable; simple types encode as a single string."""

    def __init__(self, simple=False):
        self.simple = simple
