import logging
import uuid
from collections import OrderedDict
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

import core
from controls import direction_from_swipe
from engine import GridEngine, MoveResult
from leaderboard import Leaderboard, ScoreBoardData
from settings import MAX_BOARD_SIZE, Settings, load_settings

logger = logging.getLogger(__name__)

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def _rate_limit() -> str:
    return get_settings().rate_limit


# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="Play sliding-tile games held by the server, with single-step undo "
                "and a shared leaderboard.",
    version="2.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.on_event("startup")
async def _startup() -> None:
    logging.basicConfig(level=get_settings().log_level)


# --- Session storage ---

class GameStore:
    """
    In-memory games keyed by id, plus the leaderboard they report to.

    At most ``config.max_games`` games are kept; creating one more drops the
    game that was created first.
    """

    def __init__(self, config: Settings, leaderboard: Optional[Leaderboard] = None) -> None:
        self.settings = config
        self.leaderboard = leaderboard if leaderboard is not None else Leaderboard(config.leaderboard_path)
        self._games: "OrderedDict[str, GridEngine]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, game_id: str) -> bool:
        return game_id in self._games

    def create(self, size: int, win_tile: Optional[int]) -> str:
        game = GridEngine(
            size=size,
            win_tile=win_tile,
            best_score=self.leaderboard.best_score,
            snapshot_noop_moves=self.settings.snapshot_noop_moves,
        )
        while len(self._games) >= self.settings.max_games:
            evicted, _ = self._games.popitem(last=False)
            logger.info("Dropped game %s to stay under %d games", evicted, self.settings.max_games)

        game_id = str(uuid.uuid4())
        self._games[game_id] = game
        logger.info("Created game %s (%dx%d)", game_id, size, size)
        return game_id

    def get(self, game_id: str) -> GridEngine:
        game = self._games.get(game_id)
        if game is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Game {game_id} not found.")
        return game

    def remove(self, game_id: str) -> None:
        if self._games.pop(game_id, None) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Game {game_id} not found.")
        logger.info("Removed game %s", game_id)


_store: Optional[GameStore] = None


def get_store() -> GameStore:
    global _store
    if _store is None:
        _store = GameStore(get_settings())
    return _store


# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    size: Optional[int] = Field(
        default=None,
        ge=2,
        le=MAX_BOARD_SIZE,
        description="Size of the N x N game board. Defaults to the server setting."
    )
    win_tile: Optional[int] = Field(
        default=None,
        ge=2,
        description="Tile value that marks the game as won. Defaults to the server setting."
    )


class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    game_id: str
    board: List[List[int]] = Field(..., description="The N x N game board, represented as a list of lists.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    best_score: int = Field(..., ge=0, description="Best score known to the server.")
    game_over: bool
    game_won: bool
    can_undo: bool
    win_tile: Optional[int] = None
    board_size: int = Field(..., gt=0, description="The dimension N of the N x N board.")


class MoveRequestData(BaseModel):
    direction: core.Direction = Field(..., description="Direction of the move (up, down, left, right).")


class SwipeRequestData(BaseModel):
    start_x: float
    start_y: float
    end_x: float
    end_y: float


class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    points_earned: int = 0
    new_best: bool = False
    spawned: Optional[List[int]] = Field(default=None, description="[row, col, value] of the new tile.")
    message: Optional[str] = None


class SaveScoreRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=40)


def _state(game_id: str, game: GridEngine) -> GameStateData:
    return GameStateData(
        game_id=game_id,
        board=game.board,
        score=game.score,
        best_score=game.best_score,
        game_over=game.game_over,
        game_won=game.game_won,
        can_undo=game.can_undo,
        win_tile=game.win_tile,
        board_size=game.size,
    )


def _move_response(game_id: str, game: GridEngine, result: Optional[MoveResult], store: GameStore) -> MoveResponseData:
    if result is not None and result.new_best:
        store.leaderboard.record_best(game.score)

    message = None
    if result is None:
        message = "Swipe was too short to count as a move."
    elif result.game_over:
        message = "Game Over. No more valid moves."
    elif not result.changed:
        message = "Move was not effective; board state unchanged by slide."
    elif result.game_won:
        message = "Congratulations! You won!"

    return MoveResponseData(
        **_state(game_id, game).model_dump(),
        move_was_effective=bool(result and result.changed),
        points_earned=result.points_earned if result else 0,
        new_best=bool(result and result.new_best),
        spawned=list(result.spawned) if result and result.spawned else None,
        message=message,
    )


# --- API Endpoints ---

@app.post("/games", response_model=GameStateData, status_code=status.HTTP_201_CREATED,
          summary="Start a New 2048 Game")
@limiter.limit(_rate_limit)
async def start_new_game(request: Request, new_game: NewGameSettings, store: GameStore = Depends(get_store)):
    """
    Creates a game with two random tiles, score 0 and nothing to undo.

    - **size**: Dimension of the N x N board.
    - **win_tile**: Tile value to reach to win.
    """
    size = new_game.size if new_game.size is not None else store.settings.board_size
    win_tile = new_game.win_tile if new_game.win_tile is not None else store.settings.win_tile
    game_id = store.create(size, win_tile)
    return _state(game_id, store.get(game_id))


@app.get("/games/{game_id}", response_model=GameStateData, summary="Get a Game")
@limiter.limit(_rate_limit)
async def get_game(request: Request, game_id: str, store: GameStore = Depends(get_store)):
    return _state(game_id, store.get(game_id))


@app.post("/games/{game_id}/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(_rate_limit)
async def make_move(request: Request, game_id: str, move: MoveRequestData, store: GameStore = Depends(get_store)):
    """
    Slides the tiles, adds a new tile if anything moved, and reports the result.
    Moving a finished game is not an error; it is reported as not effective.
    """
    game = store.get(game_id)
    try:
        result = game.move(move.direction)
    except core.GameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return _move_response(game_id, game, result, store)


@app.post("/games/{game_id}/swipe", response_model=MoveResponseData, summary="Move by Touch Swipe")
@limiter.limit(_rate_limit)
async def swipe(request: Request, game_id: str, gesture: SwipeRequestData, store: GameStore = Depends(get_store)):
    game = store.get(game_id)
    direction = direction_from_swipe(gesture.start_x, gesture.start_y, gesture.end_x, gesture.end_y)
    result = game.move(direction) if direction is not None else None
    return _move_response(game_id, game, result, store)


@app.post("/games/{game_id}/undo", response_model=GameStateData, summary="Undo the Last Move")
@limiter.limit(_rate_limit)
async def undo_move(request: Request, game_id: str, store: GameStore = Depends(get_store)):
    game = store.get(game_id)
    try:
        game.undo()
    except (core.NoSnapshotAvailable, core.GameAlreadyOver) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return _state(game_id, game)


@app.post("/games/{game_id}/reset", response_model=GameStateData, summary="Restart a Game")
@limiter.limit(_rate_limit)
async def reset_game(request: Request, game_id: str, store: GameStore = Depends(get_store)):
    game = store.get(game_id)
    game.reset()
    game.best_score = max(game.best_score, store.leaderboard.best_score)
    return _state(game_id, game)


@app.post("/games/{game_id}/score", response_model=ScoreBoardData, summary="Save a Score to the Leaderboard")
@limiter.limit(_rate_limit)
async def save_score(request: Request, game_id: str, entry: SaveScoreRequest, store: GameStore = Depends(get_store)):
    game = store.get(game_id)
    try:
        store.leaderboard.add(entry.name, game.score)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return store.leaderboard.snapshot()


@app.get("/leaderboard", response_model=ScoreBoardData, summary="List the Best Scores")
@limiter.limit(_rate_limit)
async def get_leaderboard(request: Request, store: GameStore = Depends(get_store)):
    return store.leaderboard.snapshot()


@app.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Discard a Game")
@limiter.limit(_rate_limit)
async def delete_game(request: Request, game_id: str, store: GameStore = Depends(get_store)):
    store.remove(game_id)
