from __future__ import annotations

import threading

from xledctl.core.locks import RWLock


def test_readers_share_the_lock() -> None:
    lock = RWLock()
    entered = threading.Event()

    def reader() -> None:
        with lock.read():
            entered.set()

    with lock.read():
        thread = threading.Thread(target=reader)
        thread.start()
        assert entered.wait(1.0)
    thread.join(1.0)


def test_writer_waits_for_readers() -> None:
    lock = RWLock()
    acquired = threading.Event()

    def writer() -> None:
        with lock.write():
            acquired.set()

    with lock.read():
        thread = threading.Thread(target=writer)
        thread.start()
        assert not acquired.wait(0.05)
    assert acquired.wait(1.0)
    thread.join(1.0)
