import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from densemap.sync import SharedValue


def test_assign_then_get():
    shared = SharedValue(3)
    shared.assign(9)
    assert shared.get() == 9


def test_default_value_is_none():
    assert SharedValue().get() is None


def test_increment_and_add():
    shared = SharedValue(5)
    shared.increment()
    shared.increment()
    shared.add(10)
    assert shared.get() == 17


def test_concurrent_increments_are_not_lost():
    shared = SharedValue(0)

    def bump():
        for _ in range(1000):
            shared.increment()

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert shared.get() == 4000


def test_assign_and_notify_wakes_waiter():
    shared = SharedValue(0)
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(shared.wait_for_signal, 5)
        while not future.done():
            shared.assign_and_notify_all(7)
            time.sleep(0.01)
        value = future.result()
    assert value == 7


def test_notify_all_wakes_with_current_value():
    shared = SharedValue("ready")
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(shared.wait_for_signal, 5)
        while not future.done():
            shared.notify_all()
            time.sleep(0.01)
        value = future.result()
    assert value == "ready"


def test_wait_for_signal_times_out():
    shared = SharedValue(1)
    with pytest.raises(TimeoutError):
        shared.wait_for_signal(timeout=0.01)


def test_get_after_sleeps_then_returns():
    shared = SharedValue(4)
    start = time.monotonic()
    value = shared.get_after(20000)
    elapsed = time.monotonic() - start
    assert value == 4
    assert elapsed >= 0.019


def test_lock_is_exposed_and_usable():
    shared = SharedValue(0)
    with shared.lock:
        assert shared.lock.locked()
    assert not shared.lock.locked()