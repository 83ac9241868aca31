from __future__ import annotations

from powerctl.core.probe import logind_running


def test_seats_dir_present(tmp_path):
    seats = tmp_path / "seats"
    seats.mkdir()
    assert logind_running(seats) is True


def test_seats_dir_missing(tmp_path):
    assert logind_running(tmp_path / "seats") is False


def test_live_check(tmp_path):
    """Expected: the answer follows the filesystem, nothing is cached."""
    seats = tmp_path / "seats"
    assert logind_running(seats) is False
    seats.mkdir()
    assert logind_running(seats) is True
    seats.rmdir()
    assert logind_running(seats) is False
