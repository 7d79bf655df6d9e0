# cli_driver.py
# This file is intended to be run to play the game on the CLI

import logging
from typing import Callable, Optional

from controls import direction_from_key
from core import GameError
from engine import GridEngine
from leaderboard import Leaderboard
from settings import Settings, load_settings

HELP = "Enter move (W/A/S/D or H/J/K/L), U to undo, N for a new game, Q to quit: "


def main(
    config: Optional[Settings] = None,
    read: Callable[[str], str] = input,
    spawner=None,
) -> None:
    config = config or load_settings()
    logging.basicConfig(level=config.log_level)

    leaderboard = Leaderboard(config.leaderboard_path)
    game = GridEngine(
        size=config.board_size,
        win_tile=config.win_tile,
        best_score=leaderboard.best_score,
        spawner=spawner,
        snapshot_noop_moves=config.snapshot_noop_moves,
    )
    announced_win = False
    display_board_state(game)

    while True:
        try:
            command = read(HELP).strip().lower()
        except EOFError:
            command = "q"

        if command == "q":
            print("Quitting game.")
            break
        if command == "n":
            leaderboard.record_best(game.score)
            game.reset()
            announced_win = False
            display_board_state(game)
            continue
        if command == "u":
            try:
                game.undo()
            except GameError as e:
                print(e)
                continue
            display_board_state(game)
            continue

        direction = direction_from_key(command)
        if direction is None:
            print("Invalid input. Use W, A, S, D.")
            continue

        result = game.move(direction)
        if not result.changed:
            print("Move did not change the board. Try a different direction.")
            continue

        display_board_state(game)
        if result.game_won and not announced_win:
            print(f"Congratulations! You reached the {game.win_tile} tile! Keep going or press Q.")
            announced_win = True
        if result.game_over:
            _finish(game, leaderboard, read)
            break

    leaderboard.record_best(game.score)


def _finish(game: GridEngine, leaderboard: Leaderboard, read: Callable[[str], str]) -> None:
    print(f"No more moves possible. Final score: {game.score}")
    try:
        name = read("Enter your name for the leaderboard (blank to skip): ").strip()
    except EOFError:
        name = ""
    if name:
        leaderboard.add(name, game.score)
        display_leaderboard(leaderboard)


# --- Display Functions ---

def display_board_state(game: GridEngine) -> None:
    """Prints the board, score, and game status to the console."""
    print(f"\nScore: {game.score}    Best: {game.best_score}")
    if game.game_over:
        print("GAME OVER!")
    elif game.game_won:
        print("YOU WON!")

    width = max(len(str(value)) for row in game.board for value in row) + 2
    for row in game.board:
        print("".join((str(value) if value else ".").rjust(width) for value in row))
    print("-" * (game.size * width))


def display_leaderboard(leaderboard: Leaderboard) -> None:
    entries = leaderboard.entries
    if not entries:
        print("No scores yet")
        return
    for rank, entry in enumerate(entries, start=1):
        print(f"{rank:>2}. {entry.name:<20} {entry.score:>8}  {entry.date.isoformat()}")


if __name__ == "__main__":
    main()
