import pytest

from app.calculation import accuracy, elapsed_minutes, round_half_up, smooth, wpm


@pytest.mark.parametrize("value,expected", [
    (2.5, 3),
    (2.4999, 2),
    (-0.5, 0),
    (-1.5, -1),
    (74.5, 75),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_wpm_counts_five_keystrokes_as_a_word():
    assert wpm(50, 60.0) == 10
    assert wpm(25, 30.0) == 10


def test_wpm_never_started_is_zero():
    assert wpm(10, None) == 0


def test_wpm_tiny_elapsed_does_not_divide_by_zero():
    assert wpm(0, 0.0) == 0
    assert elapsed_minutes(0.0) > 0


def test_accuracy_without_keystrokes_is_100():
    assert accuracy(0, 0) == 100
    assert accuracy(0, 7) == 100


def test_accuracy_is_not_clamped():
    assert accuracy(4, 1) == 75
    assert accuracy(1, 1) == 0
    assert accuracy(2, 5) == -150


def test_smooth_follows_values():
    out = smooth([0.0, 100.0, 100.0], factor=0.5)
    assert out == [0.0, 50.0, 75.0]
