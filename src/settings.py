# settings.py
# Environment-driven configuration for the game hosts.

import os
from dataclasses import dataclass
from typing import Mapping, Optional

MAX_BOARD_SIZE = 16


@dataclass(frozen=True)
class Settings:
    board_size: int = 4
    win_tile: Optional[int] = 2048
    rate_limit: str = "100/minute"
    leaderboard_path: Optional[str] = None
    log_level: str = "INFO"
    snapshot_noop_moves: bool = True
    max_games: int = 1000


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _bool_env(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Reads settings from the environment.

    GAME_WIN_TILE=0 turns the win check off. GAME_LEADERBOARD_PATH left unset
    keeps the leaderboard in memory only. GAME_MAX_GAMES bounds how many games
    the API keeps before dropping the oldest.
    """
    env = os.environ if env is None else env

    board_size = _int_env(env, "GAME_BOARD_SIZE", 4)
    if not 2 <= board_size <= MAX_BOARD_SIZE:
        raise ValueError(f"GAME_BOARD_SIZE must be between 2 and {MAX_BOARD_SIZE}, got {board_size}.")

    win_tile = _int_env(env, "GAME_WIN_TILE", 2048)
    if win_tile != 0 and win_tile < 2:
        raise ValueError(f"GAME_WIN_TILE must be 0 (disabled) or at least 2, got {win_tile}.")

    max_games = _int_env(env, "GAME_MAX_GAMES", 1000)
    if max_games < 1:
        raise ValueError(f"GAME_MAX_GAMES must be at least 1, got {max_games}.")

    return Settings(
        board_size=board_size,
        win_tile=win_tile or None,
        rate_limit=env.get("GAME_RATE_LIMIT", "100/minute"),
        leaderboard_path=env.get("GAME_LEADERBOARD_PATH") or None,
        log_level=env.get("GAME_LOG_LEVEL", "INFO").upper(),
        snapshot_noop_moves=_bool_env(env, "GAME_SNAPSHOT_NOOP_MOVES", True),
        max_games=max_games,
    )
