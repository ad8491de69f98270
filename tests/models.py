"""Reflection targets shared by the tests."""

import abc
import dataclasses
import enum
import typing
from decimal import Decimal
from typing import Annotated, ClassVar, Optional

from slotcache import Obsolete, Serializable, Transient, ctor, method


class Point:
    x: int
    y: int

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y

    @property
    def norm1(self) -> int:
        return abs(self.x) + abs(self.y)

    def move(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy

    def __eq__(self, other):
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)

    def __hash__(self):
        return hash((self.x, self.y))


class Point3(Point):
    z: int

    def __init__(self, x: int, y: int, z: int = 0):
        super().__init__(x, y)
        self.z = z


class Widget:
    """Constructors (), (int) and (int, str)."""

    def __init__(self):
        self.size = 0
        self.name = ""
        self.made_by = "()"

    @ctor
    def of_size(cls, size: int) -> "Widget":
        w = cls()
        w.size = size
        w.made_by = "(int)"
        return w

    @ctor
    def named(cls, size: int, name: str) -> "Widget":
        w = cls()
        w.size = size
        w.name = name
        w.made_by = "(int,str)"
        return w


class Calc:
    total: int

    def __init__(self):
        self.total = 0

    @method("add")
    def add_int(self, a: int, b: int) -> int:
        return a + b

    @method("add")
    def add_str(self, a: str, b: str) -> str:
        return a + b

    def sum6(self, a: int, b: int, c: int, d: int, e: int, f: int) -> int:
        return a + b + c + d + e + f

    def weighted(self, a: int, b: int, c: int, d: int, e: int, f: float = 1.0) -> float:
        return (a + b + c + d + e) * f

    def accumulate(self, v: int) -> None:
        self.total += v

    def scaled(self, v: float, factor: int = 2) -> float:
        return v * factor

    def fail(self) -> int:
        raise ValueError("boom")

    def _hidden(self) -> int:
        return 7

    @staticmethod
    def twice(v: int) -> int:
        return v * 2

    @classmethod
    def zero(cls) -> "Calc":
        return cls()


class AdvancedCalc(Calc):
    def sum6(self, a: int, b: int, c: int, d: int, e: int, f: int) -> int:
        return 100 + super().sum6(a, b, c, d, e, f)


class Shape(abc.ABC):
    @abc.abstractmethod
    def area(self) -> float:
        ...


class Config:
    """No parameterless constructor."""

    def __init__(self, path: str):
        self.path = path


class Counter:
    count = 0
    limit: ClassVar[int] = 10
    _secret = "s"


@dataclasses.dataclass(frozen=True)
class Frozen:
    a: int


class Account:
    def __init__(self):
        self._balance = 0
        self._log = []

    @property
    def balance(self) -> int:
        return self._balance

    @balance.setter
    def balance(self, value: int):
        self._balance = value

    @property
    def history(self) -> list:
        return list(self._log)


class Sample:
    """One field per supported primitive and nullable type."""

    i: int
    f: float
    s: str
    b: bool
    d: Decimal
    oi: Optional[int]
    os: Optional[str]

    def __init__(self):
        self.i = 0
        self.f = 0.0
        self.s = ""
        self.b = False
        self.d = Decimal(0)
        self.oi = None
        self.os = None


@Serializable(simple=True)
class Doc:
    title: Annotated[str, Transient()]
    body: str

    @Obsolete("use render")
    def draw(self) -> None:
        pass

    def render(self) -> None:
        pass


class SubDoc(Doc):
    def draw(self) -> None:
        pass


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Level(enum.IntEnum):
    LOW = 1
    HIGH = 2


class Painter:
    def __init__(self, color: Color = Color.RED):
        self.color = color

    def paint(self, color: Color) -> Color:
        self.color = color
        return color

    def tint(self, amount: typing.Optional[float]) -> typing.Optional[float]:
        return amount


class Sink:
    @method("put")
    def put_bytes(self, b: bytes) -> str:
        return f"bytes:{b!r}"

    @method("put")
    def put_int(self, n: int) -> str:
        return f"int:{n}"
