from __future__ import annotations

import pytest

from settings import MAX_BOARD_SIZE, Settings, load_settings


def test_defaults() -> None:
    assert load_settings({}) == Settings()


def test_overrides() -> None:
    config = load_settings(
        {
            "GAME_BOARD_SIZE": "5",
            "GAME_WIN_TILE": "0",
            "GAME_RATE_LIMIT": "5/second",
            "GAME_LEADERBOARD_PATH": "/tmp/scores.json",
            "GAME_LOG_LEVEL": "debug",
            "GAME_SNAPSHOT_NOOP_MOVES": "false",
        }
    )
    assert config.board_size == 5
    assert config.win_tile is None
    assert config.rate_limit == "5/second"
    assert config.leaderboard_path == "/tmp/scores.json"
    assert config.log_level == "DEBUG"
    assert config.snapshot_noop_moves is False


def test_bad_integer_names_variable() -> None:
    with pytest.raises(ValueError, match="GAME_BOARD_SIZE"):
        load_settings({"GAME_BOARD_SIZE": "four"})


def test_board_too_small() -> None:
    with pytest.raises(ValueError):
        load_settings({"GAME_BOARD_SIZE": "1"})


@pytest.mark.parametrize("value", ["1", "-4"])
def test_win_tile_below_two_rejected(value: str) -> None:
    with pytest.raises(ValueError, match="GAME_WIN_TILE"):
        load_settings({"GAME_WIN_TILE": value})


def test_win_tile_two_is_allowed() -> None:
    assert load_settings({"GAME_WIN_TILE": "2"}).win_tile == 2


def test_board_size_capped() -> None:
    assert load_settings({"GAME_BOARD_SIZE": str(MAX_BOARD_SIZE)}).board_size == MAX_BOARD_SIZE
    with pytest.raises(ValueError, match="GAME_BOARD_SIZE"):
        load_settings({"GAME_BOARD_SIZE": str(MAX_BOARD_SIZE + 1)})


def test_max_games() -> None:
    assert load_settings({"GAME_MAX_GAMES": "3"}).max_games == 3
    with pytest.raises(ValueError, match="GAME_MAX_GAMES"):
        load_settings({"GAME_MAX_GAMES": "0"})
