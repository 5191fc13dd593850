"""Base class for looping pipeline workers."""

from __future__ import annotations

from densemap.stopwatch import Stopwatch
from densemap.sync import SharedValue


class Worker:
    """Calls :meth:`process` in a loop until it returns False or :meth:`stop` is called."""

    def __init__(self, identifier: str, stopwatch: Stopwatch | None = None) -> None:
        self.identifier = identifier
        self.stopwatch = stopwatch if stopwatch is not None else Stopwatch.instance()
        self.stopwatch.pulse(identifier)
        self.stopwatch.send_all()
        self.halt_signal: SharedValue[bool] = SharedValue(False)
        self.is_running: SharedValue[bool] = SharedValue(False)
        self.lag_time: SharedValue[int] = SharedValue(0)

    def reset(self) -> None:
        """Return the worker to its initial state; the base worker keeps none."""

    def stop(self) -> None:
        """Ask the loop to end after the current step."""
        self.halt_signal.assign(True)

    def start(self) -> None:
        """Run the loop in the calling thread until it ends."""
        self.halt_signal.assign(False)
        self._run()

    def running(self) -> bool:
        """Whether the loop is in progress."""
        return self.is_running.get()

    def _run(self) -> None:
        print(f"{self.identifier} started")
        self.is_running.assign(True)
        while self.process() and not self.halt_signal.get():
            self.stopwatch.send_all()
        self.is_running.assign(False)
        print(f"{self.identifier} ended")

    def process(self) -> bool:
        """Do one step of work; return False to end the loop. The base worker has no work."""
        return False