# core.py
# Stateless rules for the sliding-tile game: merging, orientation and board checks.

from enum import Enum
from typing import List, Tuple, Union

Board = List[List[int]]


class Direction(str, Enum):
    """Represents the possible move directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# --- Errors ---

class GameError(Exception):
    """Base class for recoverable rule-engine errors."""


class InvalidDirection(GameError, ValueError):
    """Raised when a caller supplies something that is not a move direction."""


class NoSnapshotAvailable(GameError):
    """Raised when undo is requested with nothing to restore."""


class GameAlreadyOver(GameError):
    """Raised when a move or undo is requested after the game has ended."""


def parse_direction(value: Union[Direction, str]) -> Direction:
    """
    Converts caller input into a Direction.
    Args:
        value (Direction | str): A Direction member or its name/value, case-insensitive.
    Returns:
        Direction: The matching direction.
    Raises:
        InvalidDirection: If the value names no direction.
    """
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction(value.strip().lower())
        except ValueError:
            pass
    raise InvalidDirection(f"Invalid direction: {value!r}. Must be one of up, down, left, right.")


# --- Board Helper Functions ---

def get_board_size(board: Board) -> int:
    """
    Gets the size (N) of an N x N board.
    Args:
        board (List[List[int]]): The game board.
    Returns:
        int: The dimension of the board.
    Raises:
        ValueError: If the board is not square or empty.
    """
    if not board or not all(len(row) == len(board) for row in board):
        raise ValueError("Board must be a non-empty square matrix.")
    return len(board)


def is_valid_tile(value: int) -> bool:
    """True for 0 (empty) or a power of two no smaller than 2."""
    return isinstance(value, int) and (value == 0 or (value >= 2 and value & (value - 1) == 0))


def validate_board(board: Board) -> int:
    """
    Checks the shape and tile values of a board.
    Args:
        board (List[List[int]]): The board to check.
    Returns:
        int: The dimension of the board.
    Raises:
        ValueError: If the board is not square or holds a value that is neither 0
                    nor a power of two.
    """
    n = get_board_size(board)
    for row in board:
        for value in row:
            if not is_valid_tile(value):
                raise ValueError(f"Invalid tile value {value!r}; tiles must be 0 or a power of two >= 2.")
    return n


def new_board(size: int) -> Board:
    """Creates an empty size x size board."""
    if not isinstance(size, int) or size < 2:
        raise ValueError("Board size must be an integer of at least 2.")
    return [[0] * size for _ in range(size)]


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


def get_empty_cells(board: Board) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty (0-value) cells in the given board.
    Args:
        board (List[List[int]]): The board to check.
    Returns:
        List[Tuple[int, int]]: List of (row, col) tuples for empty cells, row-major order.
    """
    n = get_board_size(board)
    return [(row, col) for row in range(n) for col in range(n) if board[row][col] == 0]


def max_tile(board: Board) -> int:
    return max(max(row) for row in board)


# --- Line Manipulation ---

def merge_line(line: List[int]) -> Tuple[List[int], int]:
    """
    Collapses one line toward index 0.

    Zeros are removed first, keeping the order of the remaining tiles. The
    compacted line is then scanned once from the start: a tile equal to its
    successor is doubled, the successor is dropped, and the scan moves on to the
    next unmerged tile, so a tile takes part in at most one merge per move.
    The result is padded with zeros back to the input length.

    Args:
        line (List[int]): The line, oriented so that movement is toward index 0.
    Returns:
        Tuple[List[int], int]: The new line and the points earned (sum of merged values).
    """
    n = len(line)
    tiles = [value for value in line if value != 0]
    points = 0

    i = 0
    while i < len(tiles) - 1:
        if tiles[i] == tiles[i + 1]:
            tiles[i] *= 2
            points += tiles[i]
            del tiles[i + 1]
        i += 1

    tiles += [0] * (n - len(tiles))
    return tiles, points


# --- Board Transformations ---

def transpose_board(board: Board) -> Board:
    """
    Transposes a given board (swaps rows and columns).
    Args:
        board (List[List[int]]): The board to transpose.
    Returns:
        List[List[int]]: A new transposed board.
    """
    return [list(column) for column in zip(*board)]


def reverse_rows(board: Board) -> Board:
    """
    Reverses each row in a given board.
    Args:
        board (List[List[int]]): The board whose rows are to be reversed.
    Returns:
        List[List[int]]: A new board with rows reversed.
    """
    return [row[::-1] for row in board]


def _orient(board: Board, direction: Direction) -> Board:
    # Rows of the oriented board are the lines read in traversal order.
    if direction == Direction.LEFT:
        return copy_board(board)
    if direction == Direction.RIGHT:
        return reverse_rows(board)
    if direction == Direction.UP:
        return transpose_board(board)
    if direction == Direction.DOWN:
        return reverse_rows(transpose_board(board))
    raise InvalidDirection(f"Invalid direction: {direction!r}")


def _unorient(board: Board, direction: Direction) -> Board:
    if direction == Direction.LEFT:
        return board
    if direction == Direction.RIGHT:
        return reverse_rows(board)
    if direction == Direction.UP:
        return transpose_board(board)
    if direction == Direction.DOWN:
        return transpose_board(reverse_rows(board))
    raise InvalidDirection(f"Invalid direction: {direction!r}")


# --- Core Game Move Processing ---

def process_move(board: Board, direction: Union[Direction, str]) -> Tuple[Board, int, bool]:
    """
    Slides and merges every line of the board in the given direction.
    The input board is not modified.
    Args:
        board (List[List[int]]): The current game board.
        direction (Direction | str): The direction to move.
    Returns:
        Tuple[List[List[int]], int, bool]:
            - The new board state after the move.
            - The points earned by merges in this move.
            - Whether any cell differs from the input board.
    Raises:
        InvalidDirection: If an invalid direction is specified.
    """
    direction = parse_direction(direction)
    get_board_size(board)

    oriented = _orient(board, direction)
    points = 0
    for index, line in enumerate(oriented):
        oriented[index], line_points = merge_line(line)
        points += line_points

    moved_board = _unorient(oriented, direction)
    changed = moved_board != board
    return moved_board, points, changed


# --- Game State Checks ---

def check_for_win(board: Board, win_tile: int = 2048) -> bool:
    """
    Check if a tile with at least the win_tile value exists.
    Args:
        board (List[List[int]]): The game board.
        win_tile (int): The tile value that signifies a win. Default is 2048.
    Returns:
        bool: True if the game is won, False otherwise.
    """
    return max_tile(board) >= win_tile


def has_adjacent_pair(board: Board) -> bool:
    """True if two horizontally or vertically adjacent cells hold the same non-zero value."""
    n = get_board_size(board)
    for row in range(n):
        for col in range(n):
            value = board[row][col]
            if value == 0:
                continue
            if col < n - 1 and board[row][col + 1] == value:
                return True
            if row < n - 1 and board[row + 1][col] == value:
                return True
    return False


def is_terminal(board: Board) -> bool:
    """
    A board is terminal when it has no empty cell and no adjacent equal pair.
    Args:
        board (List[List[int]]): The game board.
    Returns:
        bool: True if no move can change the board.
    """
    return not get_empty_cells(board) and not has_adjacent_pair(board)
