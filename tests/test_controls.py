from __future__ import annotations

import pytest

from controls import direction_from_key, direction_from_swipe
from core import Direction


@pytest.mark.parametrize(
    ("key", "direction"),
    [("w", Direction.UP), ("A", Direction.LEFT), ("ArrowDown", Direction.DOWN), ("l", Direction.RIGHT)],
)
def test_direction_from_key(key: str, direction: Direction) -> None:
    assert direction_from_key(key) == direction


def test_unknown_key() -> None:
    assert direction_from_key("x") is None


@pytest.mark.parametrize(
    ("end", "direction"),
    [
        ((50, 100), Direction.LEFT),
        ((150, 100), Direction.RIGHT),
        ((100, 50), Direction.UP),
        ((100, 150), Direction.DOWN),
    ],
)
def test_swipe_directions(end: tuple[int, int], direction: Direction) -> None:
    assert direction_from_swipe(100, 100, *end) == direction


def test_short_swipe_is_ignored() -> None:
    assert direction_from_swipe(100, 100, 85, 115) is None
    assert direction_from_swipe(100, 100, 80, 100) is None


def test_swipe_just_past_threshold() -> None:
    assert direction_from_swipe(100, 100, 79, 100) == Direction.LEFT


def test_diagonal_tie_goes_vertical() -> None:
    assert direction_from_swipe(100, 100, 60, 60) == Direction.UP
    assert direction_from_swipe(100, 100, 59, 60) == Direction.LEFT
