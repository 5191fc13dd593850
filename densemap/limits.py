"""Numeric limits of the C scalar types used by the volume kernels."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class NumericLimits:
    """Range and special values of one scalar type.

    Values the type does not define (``epsilon`` and the special floating
    values for integer types, for instance) are ``None``.
    """

    name: str
    min: int | float | bool
    max: int | float | bool
    is_signed: bool
    is_integer: bool = True
    epsilon: float | None = None
    infinity: float | None = None
    quiet_nan: float | None = None

    def contains(self, value: int | float) -> bool:
        """Whether ``value`` lies within ``min`` and ``max``."""
        return self.min <= value <= self.max


def _integer(name: str, bits: int, signed: bool) -> NumericLimits:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    return NumericLimits(name, low, high, signed)


_LIMITS: dict[str, NumericLimits] = {
    "bool": NumericLimits("bool", False, True, False),
    "char": _integer("char", 8, True),
    "signed char": _integer("signed char", 8, True),
    "unsigned char": _integer("unsigned char", 8, False),
    "short": _integer("short", 16, True),
    "unsigned short": _integer("unsigned short", 16, False),
    "int": _integer("int", 32, True),
    "unsigned int": _integer("unsigned int", 32, False),
    "long": _integer("long", 64, True),
    "unsigned long": _integer("unsigned long", 64, False),
    "float": NumericLimits(
        "float",
        1.175494351e-38,
        3.402823466e38,
        True,
        is_integer=False,
        epsilon=1.192092896e-07,
        infinity=math.inf,
        quiet_nan=math.nan,
    ),
    "double": NumericLimits(
        "double",
        2.2250738585072014e-308,
        1.7976931348623158e308,
        True,
        is_integer=False,
        epsilon=2.2204460492503131e-016,
    ),
}


def limits_for(type_name: str) -> NumericLimits:
    """Return the limits of the C type named ``type_name``, e.g. ``"unsigned short"``."""
    key = " ".join(type_name.split())
    try:
        return _LIMITS[key]
    except KeyError:
        raise ValueError(f"no numeric limits for type {type_name!r}") from None