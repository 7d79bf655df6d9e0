# controls.py
# Translates host input (keys, touch swipes) into move directions.

from typing import Dict, Optional

from core import Direction

SWIPE_THRESHOLD = 20

KEY_BINDINGS: Dict[str, Direction] = {
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
    "k": Direction.UP,
    "h": Direction.LEFT,
    "j": Direction.DOWN,
    "l": Direction.RIGHT,
    "arrowup": Direction.UP,
    "arrowleft": Direction.LEFT,
    "arrowdown": Direction.DOWN,
    "arrowright": Direction.RIGHT,
}


def direction_from_key(key: str) -> Optional[Direction]:
    """Looks up a key name, case-insensitive. Unknown keys give None."""
    return KEY_BINDINGS.get(key.strip().lower())


def direction_from_swipe(
    start_x: float,
    start_y: float,
    end_x: float,
    end_y: float,
    threshold: float = SWIPE_THRESHOLD,
) -> Optional[Direction]:
    """
    Maps a touch gesture to a direction.
    Args:
        start_x, start_y: Where the touch began, in screen pixels.
        end_x, end_y: Where the touch ended.
        threshold (float): Minimum travel on either axis, in pixels.
    Returns:
        Optional[Direction]: The swipe direction, or None for a gesture that is too short.
    """
    diff_x = start_x - end_x
    diff_y = start_y - end_y

    if abs(diff_x) <= threshold and abs(diff_y) <= threshold:
        return None

    # Horizontal only wins on strictly greater travel.
    if abs(diff_x) > abs(diff_y):
        return Direction.LEFT if diff_x > 0 else Direction.RIGHT
    return Direction.UP if diff_y > 0 else Direction.DOWN
