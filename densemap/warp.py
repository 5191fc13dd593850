"""Lock-step simulation of 32-lane warp primitives: scans, lane masks and reductions."""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from typing import TypeVar

LOG_WARP_SIZE = 5
WARP_SIZE = 1 << LOG_WARP_SIZE
_FULL_MASK = 0xFFFFFFFF

T = TypeVar("T")


class ScanKind(enum.Enum):
    """Whether a scan result includes the lane's own value."""

    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"


def scan_warp(values: Sequence[T], kind: ScanKind = ScanKind.INCLUSIVE) -> list[T]:
    """Prefix sums restarting every 32 elements, as each thread of a warp sees them.

    For an exclusive scan the first lane of each warp gets 0.
    """
    buf = list(values)
    lanes = [i & (WARP_SIZE - 1) for i in range(len(buf))]
    offset = 1
    while offset < WARP_SIZE:
        buf = [
            buf[i - offset] + v if lane >= offset else v
            for i, (v, lane) in enumerate(zip(buf, lanes))
        ]
        offset <<= 1
    if kind is ScanKind.INCLUSIVE:
        return buf
    return [buf[i - 1] if lane > 0 else 0 for i, lane in enumerate(lanes)]


def _check_lane(lane: int) -> None:
    if not 0 <= lane < WARP_SIZE:
        raise ValueError(f"lane must be in 0..{WARP_SIZE - 1}, got {lane}")


def lane_mask_le(lane: int) -> int:
    """Mask of the lanes at or below ``lane``."""
    _check_lane(lane)
    return _FULL_MASK >> (WARP_SIZE - 1 - lane)


def lane_mask_lt(lane: int) -> int:
    """Mask of the lanes strictly below ``lane``."""
    _check_lane(lane)
    return (1 << lane) - 1


def binary_incl_scan(lane: int, ballot_mask: int) -> int:
    """Number of set ballot bits at or below ``lane``."""
    return bin(lane_mask_le(lane) & ballot_mask & _FULL_MASK).count("1")


def binary_excl_scan(lane: int, ballot_mask: int) -> int:
    """Number of set ballot bits strictly below ``lane``."""
    return bin(lane_mask_lt(lane) & ballot_mask & _FULL_MASK).count("1")


def warp_reduce(values: Sequence[T], op: Callable[[T, T], T]) -> T:
    """Tree-reduce exactly 32 values with ``op`` the way a warp does; return lane 0's result."""
    buf = list(values)
    if len(buf) != WARP_SIZE:
        raise ValueError(f"a warp reduction needs {WARP_SIZE} values, got {len(buf)}")
    half = WARP_SIZE // 2
    offset = half
    while offset:
        buf[:half] = [op(a, b) for a, b in zip(buf[:half], buf[offset : offset + half])]
        offset >>= 1
    return buf[0]