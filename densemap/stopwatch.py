"""Named timing measurements, sent as UDP packets to a local monitor."""

from __future__ import annotations

import socket
import struct
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 45454
# Minimum gap between two packets, in microseconds.
SEND_INTERVAL_US = 10000

_TIMING = 0
_TICK = 1
_TOCK = 2
_UINT64 = 1 << 64


def current_time_us() -> int:
    """Return wall-clock time in microseconds."""
    return time.time_ns() // 1000


def _as_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


class Stopwatch:
    """Collects durations in milliseconds plus raw tick and tock times."""

    _instance: Stopwatch | None = None

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self._address = (host, port)
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        now = current_time_us()
        self.signature = now % _UINT64
        self._current_send = self._last_send = now
        self._timings_ms: dict[str, float] = {}
        self._ticks_us: dict[str, int] = {}
        self._tocks_us: dict[str, int] = {}

    @classmethod
    def instance(cls) -> Stopwatch:
        """Return the process-wide stopwatch."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def timings(self) -> dict[str, float]:
        """Durations in milliseconds, ordered by name."""
        return dict(sorted(self._timings_ms.items()))

    def add_timing(self, name: str, duration_us: int) -> None:
        """Record a duration given in microseconds; zero is ignored."""
        if duration_us > 0:
            self._timings_ms[name] = _as_float32(duration_us / 1000.0)

    def set_signature(self, signature: int) -> None:
        """Replace the per-process signature sent with each packet."""
        self.signature = signature % _UINT64

    def print_all(self, out: TextIO | None = None) -> None:
        """Write every timing as ``name: valuems``, followed by a blank line."""
        stream = sys.stdout if out is None else out
        for name, value in sorted(self._timings_ms.items()):
            stream.write(f"{name}: {value:g}ms\n")
        stream.write("\n")

    def pulse(self, name: str) -> None:
        """Record a heartbeat for ``name``."""
        self._timings_ms[name] = 1.0

    def send_all(self) -> bool:
        """Send a packet if the send interval has passed; return whether one was sent."""
        self._current_send = current_time_us()
        if self._current_send - self._last_send <= SEND_INTERVAL_US:
            return False
        try:
            self._socket.sendto(self.serialise(), self._address)
        except OSError:
            pass
        self._last_send = self._current_send
        return True

    def tick(self, name: str, start_us: int | None = None) -> None:
        """Mark the start of ``name``; defaults to now."""
        self._ticks_us[name] = current_time_us() if start_us is None else start_us

    def tock(self, name: str, end_us: int | None = None) -> None:
        """Mark the end of ``name`` and record its duration if it was ticked."""
        end = current_time_us() if end_us is None else end_us
        self._tocks_us[name] = end
        start = self._ticks_us.get(name)
        if start is not None:
            duration = _as_float32(((end - start) % _UINT64) / 1000.0)
            if duration > 0:
                self._timings_ms[name] = duration

    def serialise(self) -> bytes:
        """Encode all measurements as one packet.

        Layout: int32 packet size, uint64 signature, then for each entry a
        type byte, the NUL-terminated name and the value (float32 for
        timings, uint64 for ticks and tocks).
        """
        entries = []
        for kind, mapping, fmt in (
            (_TIMING, self._timings_ms, "<f"),
            (_TICK, self._ticks_us, "<Q"),
            (_TOCK, self._tocks_us, "<Q"),
        ):
            for name, value in sorted(mapping.items()):
                entries.append(
                    bytes([kind]) + name.encode("utf-8") + b"\x00" + struct.pack(fmt, value)
                )
        body = b"".join(entries)
        header = struct.pack("<iQ", struct.calcsize("<iQ") + len(body), self.signature)
        return header + body

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        """Time the enclosed block and record it under ``name``."""
        start = current_time_us()
        yield
        self.add_timing(name, current_time_us() - start)

    def close(self) -> None:
        """Release the socket."""
        self._socket.close()