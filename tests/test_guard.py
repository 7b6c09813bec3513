import threading

import pytest

from margin_dashboard.errors import ResourceBusy
from margin_dashboard.guard import CITIES_KEY, SingleFlight, table_key


def test_overlapping_hold_is_rejected():
    guard = SingleFlight()

    with guard.hold(table_key("Rio"), "Rio"):
        assert guard.busy(table_key("Rio"))
        with pytest.raises(ResourceBusy, match="Another request for Rio is already in progress"):
            with guard.hold(table_key("Rio"), "Rio"):
                pass

    assert not guard.busy(table_key("Rio"))


def test_different_keys_do_not_block_each_other():
    guard = SingleFlight()

    with guard.hold(table_key("Rio")):
        with guard.hold(table_key("Recife")):
            with guard.hold(CITIES_KEY):
                assert guard.busy(CITIES_KEY)


def test_key_released_after_exception():
    guard = SingleFlight()

    with pytest.raises(RuntimeError):
        with guard.hold(CITIES_KEY):
            raise RuntimeError("boom")

    with guard.hold(CITIES_KEY):
        pass


def test_hold_from_another_thread_is_rejected():
    guard = SingleFlight()
    entered = threading.Event()
    release = threading.Event()

    def worker():
        with guard.hold(table_key("Rio")):
            entered.set()
            release.wait(5)

    thread = threading.Thread(target=worker)
    thread.start()
    entered.wait(5)
    try:
        with pytest.raises(ResourceBusy):
            with guard.hold(table_key("Rio")):
                pass
    finally:
        release.set()
        thread.join(5)

    assert not guard.busy(table_key("Rio"))
