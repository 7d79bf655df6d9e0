# engine.py
# Stateful game session built on the stateless rules in core.py.

import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from core import (
    Board,
    Direction,
    GameAlreadyOver,
    NoSnapshotAvailable,
    check_for_win,
    copy_board,
    get_empty_cells,
    is_terminal,
    new_board,
    parse_direction,
    process_move,
    validate_board,
)

logger = logging.getLogger(__name__)

SpawnedTile = Tuple[int, int, int]


@dataclass(frozen=True)
class Snapshot:
    """Saved (grid, score) pair for a single-level undo."""
    grid: Tuple[Tuple[int, ...], ...]
    score: int

    @classmethod
    def capture(cls, board: Board, score: int) -> "Snapshot":
        return cls(grid=tuple(tuple(row) for row in board), score=score)

    def as_lists(self) -> Board:
        return [list(row) for row in self.grid]


@dataclass(frozen=True)
class MoveResult:
    """Outcome of one move attempt."""
    changed: bool
    points_earned: int
    game_over: bool
    game_won: bool = False
    spawned: Optional[SpawnedTile] = None
    new_best: bool = False


class UndoBuffer:
    """Holds at most one snapshot; restoring it empties the buffer."""

    def __init__(self) -> None:
        self._snapshot: Optional[Snapshot] = None

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def save(self, board: Board, score: int) -> Snapshot:
        self._snapshot = Snapshot.capture(board, score)
        return self._snapshot

    def restore(self) -> Snapshot:
        if self._snapshot is None:
            raise NoSnapshotAvailable("There is no move to undo.")
        snapshot, self._snapshot = self._snapshot, None
        return snapshot

    def clear(self) -> None:
        self._snapshot = None


class RandomTileSpawner:
    """
    Places a new tile on a uniformly chosen empty cell.

    The tile is a 2, or a 4 with probability ``four_probability``.
    """

    def __init__(self, rng: Optional[random.Random] = None, four_probability: float = 0.1) -> None:
        if not 0.0 <= four_probability <= 1.0:
            raise ValueError("four_probability must be between 0 and 1.")
        self.rng = rng if rng is not None else random.Random()
        self.four_probability = four_probability

    def spawn(self, board: Board) -> Optional[SpawnedTile]:
        """
        Adds a tile to the board in place.
        Args:
            board (List[List[int]]): The board to modify.
        Returns:
            (row, col, value) of the new tile, or None when the grid is full.
        """
        empty_cells = get_empty_cells(board)
        if not empty_cells:
            return None
        row, col = self.rng.choice(empty_cells)
        value = 4 if self.rng.random() < self.four_probability else 2
        board[row][col] = value
        return row, col, value


class GridEngine:
    """
    Owns one game: the grid, score, best score, end flags and the undo buffer.

    The engine is synchronous and not safe for concurrent use; callers must
    serialise ``move``, ``undo`` and ``reset`` for a given engine.

    Args:
        size: Dimension N of the N x N grid.
        win_tile: Tile value that sets ``game_won``; None disables the check.
        best_score: Best score known to the host, raised as the score passes it.
        spawner: Object with a ``spawn(board)`` method; defaults to RandomTileSpawner.
        snapshot_noop_moves: When True a move that changes nothing still replaces
            the undo snapshot. When False the snapshot is only replaced by moves
            that change the grid.
        strict: When True, moving after the game is over raises GameAlreadyOver
            instead of returning an unchanged result.
    """

    def __init__(
        self,
        size: int = 4,
        win_tile: Optional[int] = None,
        best_score: int = 0,
        spawner=None,
        snapshot_noop_moves: bool = True,
        strict: bool = False,
    ) -> None:
        if win_tile is not None and win_tile < 2:
            raise ValueError("win_tile must be at least 2.")
        if best_score < 0:
            raise ValueError("best_score must not be negative.")
        self._board: Board = new_board(size)
        self.size = size
        self.win_tile = win_tile
        self.best_score = best_score
        self.spawner = spawner if spawner is not None else RandomTileSpawner()
        self.snapshot_noop_moves = snapshot_noop_moves
        self.strict = strict
        self.undo_buffer = UndoBuffer()
        self.score = 0
        self.game_over = False
        self.game_won = False
        self.reset()

    # --- read accessors ---

    @property
    def board(self) -> Board:
        """A copy of the current grid."""
        return copy_board(self._board)

    @property
    def can_undo(self) -> bool:
        return self.undo_buffer.has_snapshot and not self.game_over

    # --- operations ---

    def reset(self) -> None:
        self._board = new_board(self.size)
        self.score = 0
        self.game_over = False
        self.game_won = False
        self.undo_buffer.clear()
        self.spawner.spawn(self._board)
        self.spawner.spawn(self._board)
        logger.debug("New %dx%d game started", self.size, self.size)

    def load(self, board: Board, score: int = 0) -> None:
        """Installs a saved board and score, dropping any undo snapshot."""
        if validate_board(board) != self.size:
            raise ValueError(f"Board must be {self.size}x{self.size}.")
        if score < 0:
            raise ValueError("Score must not be negative.")
        self._board = copy_board(board)
        self.score = score
        self.undo_buffer.clear()
        self.game_over = is_terminal(self._board)
        self.game_won = self._reached_win_tile()
        self._raise_best()

    def move(self, direction: Union[Direction, str]) -> MoveResult:
        direction = parse_direction(direction)
        if self.game_over:
            if self.strict:
                raise GameAlreadyOver("The game is over; start a new game.")
            return MoveResult(changed=False, points_earned=0, game_over=True, game_won=self.game_won)

        if self.snapshot_noop_moves:
            self.undo_buffer.save(self._board, self.score)

        moved_board, points, changed = process_move(self._board, direction)
        if not changed:
            return MoveResult(changed=False, points_earned=0, game_over=False, game_won=self.game_won)

        if not self.snapshot_noop_moves:
            self.undo_buffer.save(self._board, self.score)

        self._board = moved_board
        self.score += points
        spawned = self.spawner.spawn(self._board)
        new_best = self._raise_best()
        if not self.game_won and self._reached_win_tile():
            self.game_won = True
            logger.info("Win tile %d reached with score %d", self.win_tile, self.score)
        if self.is_terminal():
            self.game_over = True
            logger.info("Game over with score %d", self.score)

        logger.debug("Moved %s: +%d points, spawned %s", direction.value, points, spawned)
        return MoveResult(
            changed=True,
            points_earned=points,
            game_over=self.game_over,
            game_won=self.game_won,
            spawned=spawned,
            new_best=new_best,
        )

    def undo(self) -> Snapshot:
        """
        Restores the grid and score saved before the last move.
        Raises:
            GameAlreadyOver: If the game has ended.
            NoSnapshotAvailable: If there is nothing to undo.
        """
        if self.game_over:
            raise GameAlreadyOver("The game is over; undo is not available.")
        snapshot = self.undo_buffer.restore()
        self._board = snapshot.as_lists()
        self.score = snapshot.score
        self.game_won = self._reached_win_tile()
        logger.debug("Undo restored score %d", self.score)
        return snapshot

    def is_terminal(self) -> bool:
        return is_terminal(self._board)

    # --- helpers ---

    def _reached_win_tile(self) -> bool:
        return self.win_tile is not None and check_for_win(self._board, self.win_tile)

    def _raise_best(self) -> bool:
        if self.score > self.best_score:
            self.best_score = self.score
            return True
        return False
