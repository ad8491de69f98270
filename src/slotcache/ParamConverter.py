#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import datetime
import enum
import math
import re
import typing
import uuid
from decimal import Decimal
from fractions import Fraction
from pathlib import Path, PurePath

from .Err import ConversionErr
from .Types import (NoneType, is_instance, is_numeric, is_numeric_type,
                    is_optional, is_union, strip_annotated, unwrap_optional)


# Timespan string: [-][d.]hh:mm:ss[.fffffff] or str(timedelta) style "d day(s), h:mm:ss[.ffffff]"
_TIMEDELTA_RE = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)(?:\.|\s+days?,\s*))?"
    r"(?P<h>\d{1,2}):(?P<m>\d{2}):(?P<s>\d{2})(?:\.(?P<f>\d{1,7}))?$")

# Targets of the generic last resort conversion
_PRIMITIVES = (bool, int, float, complex, Decimal, bytes)

_TRUE_STRS = ("true",)
_FALSE_STRS = ("false",)


def _parse_timedelta(s):
    m = _TIMEDELTA_RE.match(s.strip())
    if m is None:
        raise ValueError(f"Invalid timespan: {s!r}")
    frac = (m.group("f") or "").ljust(7, "0")
    td = datetime.timedelta(
        days=int(m.group("days") or 0),
        hours=int(m.group("h")),
        minutes=int(m.group("m")),
        seconds=int(m.group("s")),
        microseconds=int(frac) // 10)
    return -td if m.group("sign") else td


# Parsers for well-known types from a string, checked in order
_WELL_KNOWN = (
    (datetime.datetime, datetime.datetime.fromisoformat),
    (datetime.date, datetime.date.fromisoformat),
    (datetime.time, datetime.time.fromisoformat),
    (datetime.timedelta, _parse_timedelta),
    (uuid.UUID, uuid.UUID),
    (Decimal, Decimal),
    (PurePath, Path),
)


class ParamConverter:
    """Coerces argument values to declared parameter types.

    Conversion rules apply in order:

    1. value already assignable to the target - returned unchanged
    2. nullable target (Optional[X]) - retried against X
    3. numeric value to numeric target - explicit widening/narrowing,
       float to int rounds half to even
    4. str target - str(value)
    5. well-known types parsed from a string: datetime, date, time,
       timedelta, UUID, Decimal, Path
    6. enums from a member name (case-insensitive) or member value
    7. generic last resort for bool, int, float, complex, Decimal, bytes

    Anything else raises ConversionErr.
    """

    def convert(self, value, target):
        """Convert value to target type.

        Args:
            value: Value to convert
            target: Target class or typing construct

        Returns:
            Converted value

        Raises:
            ConversionErr: If no rule applies or the conversion fails
        """
        target = strip_annotated(target)

        # 1. assignable
        if is_instance(value, target):
            return value

        # 2. nullable wrapper and unions
        if is_optional(target):
            return self.convert(value, unwrap_optional(target))
        if is_union(target):
            return self._convert_union(value, target)

        if value is None or target is NoneType or not isinstance(target, type):
            raise ConversionErr.make_for(value, target)

        try:
            return self._convert_to_class(value, target)
        except ConversionErr:
            raise
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ConversionErr.make_for(value, target, e) from e

    def can_convert(self, value, target):
        """Return True if convert(value, target) would succeed."""
        try:
            self.convert(value, target)
            return True
        except ConversionErr:
            return False

    def try_convert(self, value, target):
        """Convert without raising.

        Returns:
            Tuple (ok, converted); converted is None when ok is False
        """
        try:
            return True, self.convert(value, target)
        except ConversionErr:
            return False, None

    def _convert_union(self, value, target):
        for arg in typing.get_args(target):
            ok, result = self.try_convert(value, arg)
            if ok:
                return result
        raise ConversionErr.make_for(value, target)

    def _convert_to_class(self, value, target):
        is_enum = issubclass(target, enum.Enum)

        # 3. numeric
        if is_numeric(value) and is_numeric_type(target) and not is_enum:
            return self._convert_numeric(value, target)

        # 4. str
        if issubclass(target, str) and not is_enum:
            return target(str(value))

        # 5. well-known types from a string
        if isinstance(value, str):
            for cls, parse in _WELL_KNOWN:
                if issubclass(target, cls):
                    result = parse(value)
                    return result if isinstance(result, target) else target(result)

        # 6. enums
        if is_enum:
            return self._convert_enum(value, target)

        # 7. generic last resort
        if issubclass(target, _PRIMITIVES):
            return self._convert_primitive(value, target)

        raise ConversionErr.make_for(value, target)

    @staticmethod
    def _convert_numeric(value, target):
        if isinstance(value, float) and not math.isfinite(value):
            raise ConversionErr.make_for(value, target)
        if isinstance(value, Decimal) and not value.is_finite():
            raise ConversionErr.make_for(value, target)
        if issubclass(target, int):
            result = round(value)
        elif issubclass(target, float):
            result = float(value)
        elif issubclass(target, Decimal):
            if isinstance(value, float):
                result = Decimal(repr(value))
            elif isinstance(value, Fraction):
                result = Decimal(value.numerator) / Decimal(value.denominator)
            else:
                result = Decimal(value)
        else:
            result = Fraction(value)
        return result if type(result) is target else target(result)

    @staticmethod
    def _convert_enum(value, target):
        if isinstance(value, str):
            name = value.strip()
            member = target.__members__.get(name)
            if member is not None:
                return member
            lower = name.lower()
            for key, member in target.__members__.items():
                if key.lower() == lower:
                    return member
        try:
            return target(value)
        except ValueError as e:
            raise ConversionErr.make_for(value, target, e) from e

    @staticmethod
    def _convert_primitive(value, target):
        if issubclass(target, bool):
            if isinstance(value, str):
                s = value.strip().lower()
                if s in _TRUE_STRS:
                    return True
                if s in _FALSE_STRS:
                    return False
                raise ConversionErr.make_for(value, target)
            if is_numeric(value):
                return value != 0
            raise ConversionErr.make_for(value, target)
        if issubclass(target, bytes):
            if isinstance(value, str):
                return target(value.encode("utf-8"))
            if isinstance(value, (bytes, bytearray, memoryview)):
                return target(value)
            raise ConversionErr.make_for(value, target)
        if isinstance(value, str):
            value = value.strip()
        elif isinstance(value, bool):
            value = int(value)
        elif not isinstance(value, (bytes, bytearray, complex)):
            raise ConversionErr.make_for(value, target)
        return target(value)
