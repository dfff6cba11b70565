"""
Tests for the reference-counted scroll lock and the modal shell.
"""
import pytest

from skillshub.client.modals import SlideModal
from skillshub.client.scroll_lock import ScrollLock


def test_lease_release_is_idempotent():
    lock = ScrollLock()
    lease = lock.acquire()
    assert lock.locked

    lease.release()
    lease.release()

    assert not lock.locked
    assert lock.holders == 0
    assert lease.released


def test_hold_releases_on_exception():
    lock = ScrollLock()

    with pytest.raises(RuntimeError):
        with lock.hold():
            assert lock.locked
            raise RuntimeError("boom")

    assert not lock.locked


def test_nested_modals_keep_scroll_locked_until_outer_closes():
    """Modal A opens modal B: closing B must not unlock while A is open."""
    lock = ScrollLock()
    outer = SlideModal(lock, "Talent Profile")
    inner = SlideModal(lock, "Recruit Talent")

    outer.open()
    inner.open()
    assert lock.holders == 2

    inner.close()
    assert lock.locked

    outer.close()
    assert not lock.locked


def test_modal_close_twice_and_reopen():
    lock = ScrollLock()
    modal = SlideModal(lock)

    modal.open()
    modal.open()
    assert lock.holders == 1

    modal.close()
    modal.close()
    assert lock.holders == 0

    with modal:
        assert modal.is_open
    assert not modal.is_open
    assert not lock.locked
