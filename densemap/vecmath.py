"""Small 3-vector helpers and fixed-point TSDF packing."""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np

# Fixed-point divisor for TSDF values (the largest signed 16-bit value).
DIVISOR = 32767


@dataclass(frozen=True)
class Vec3:
    """An immutable 3-vector supporting +, - and elementwise or scalar *."""

    x: float
    y: float
    z: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    @staticmethod
    def _pair(other: Vec3 | float) -> tuple[float, float, float]:
        if isinstance(other, Vec3):
            return other.x, other.y, other.z
        return other, other, other

    def __add__(self, other: Vec3 | float) -> Vec3:
        ox, oy, oz = self._pair(other)
        return Vec3(self.x + ox, self.y + oy, self.z + oz)

    def __sub__(self, other: Vec3 | float) -> Vec3:
        ox, oy, oz = self._pair(other)
        return Vec3(self.x - ox, self.y - oy, self.z - oz)

    def __mul__(self, other: Vec3 | float) -> Vec3:
        ox, oy, oz = self._pair(other)
        return Vec3(self.x * ox, self.y * oy, self.z * oz)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)


def _vec(v: Vec3 | Sequence[float]) -> Vec3:
    return v if isinstance(v, Vec3) else Vec3(*v)


def dot(a: Vec3 | Sequence[float], b: Vec3 | Sequence[float]) -> float:
    """Dot product."""
    a, b = _vec(a), _vec(b)
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross(a: Vec3 | Sequence[float], b: Vec3 | Sequence[float]) -> Vec3:
    """Cross product."""
    a, b = _vec(a), _vec(b)
    return Vec3(a.y * b.z - a.z * b.y, a.z * b.x - a.x * b.z, a.x * b.y - a.y * b.x)


def norm(v: Vec3 | Sequence[float]) -> float:
    """Euclidean length."""
    return math.sqrt(dot(v, v))


def normalized(v: Vec3 | Sequence[float]) -> Vec3:
    """Unit vector along ``v``; raises ZeroDivisionError for the zero vector."""
    v = _vec(v)
    return v * (1.0 / norm(v))


def normalized_safe(v: Vec3 | Sequence[float]) -> Vec3:
    """Unit vector along ``v``, or ``v`` itself when it has zero length."""
    v = _vec(v)
    squared = dot(v, v)
    return v * (1.0 / math.sqrt(squared)) if squared > 0 else v


def mat_vec(m: Sequence[Vec3 | Sequence[float]], v: Vec3 | Sequence[float]) -> Vec3:
    """Multiply a 3x3 matrix, given as three rows, by a vector."""
    if len(m) != 3:
        raise ValueError("matrix must have exactly three rows")
    r0, r1, r2 = (_vec(row) for row in m)
    return Vec3(dot(r0, v), dot(r1, v), dot(r2, v))


def pack_tsdf(tsdf: float) -> int:
    """Encode a TSDF value as a clamped fixed-point short, truncating toward zero."""
    scaled = np.float32(tsdf) * np.float32(DIVISOR)
    return max(-DIVISOR, min(DIVISOR, int(scaled)))


def unpack_tsdf(value: int) -> float:
    """Decode a fixed-point short back to a TSDF value."""
    return float(np.float32(value) / np.float32(DIVISOR))


def clear_tsdf() -> int:
    """The packed value of an empty voxel."""
    return pack_tsdf(0.0)