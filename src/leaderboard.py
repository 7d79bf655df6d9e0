# leaderboard.py
# Best score and top scores kept by the host, optionally saved to a JSON file.

import datetime
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

MAX_ENTRIES = 10


class LeaderboardEntry(BaseModel):
    """One saved score."""
    name: str = Field(..., min_length=1, description="Player name.")
    score: int = Field(..., ge=0, description="Final score of the game.")
    date: datetime.date = Field(default_factory=datetime.date.today, description="Day the score was saved.")


class ScoreBoardData(BaseModel):
    """Everything the leaderboard persists."""
    best_score: int = Field(default=0, ge=0)
    entries: List[LeaderboardEntry] = Field(default_factory=list)


class Leaderboard:
    """
    Keeps the best score and the top MAX_ENTRIES scores, highest first.

    With a path the data is loaded on construction and written after each change.
    An unreadable or malformed file is logged and replaced by an empty board.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, max_entries: int = MAX_ENTRIES) -> None:
        self.path = Path(path) if path is not None else None
        self.max_entries = max_entries
        self._data = self._load()

    @property
    def best_score(self) -> int:
        return self._data.best_score

    @property
    def entries(self) -> List[LeaderboardEntry]:
        return list(self._data.entries)

    def record_best(self, score: int) -> bool:
        """Raises the best score if ``score`` beats it. Returns True when it did."""
        if score <= self._data.best_score:
            return False
        self._data.best_score = score
        self._save()
        return True

    def add(self, name: str, score: int) -> LeaderboardEntry:
        """
        Saves a score under a player name.
        Raises:
            ValueError: If the name is blank or the score is negative.
        """
        name = name.strip()
        if not name:
            raise ValueError("Please enter your name.")
        entry = LeaderboardEntry(name=name, score=score)

        entries = self._data.entries + [entry]
        # sorted() is stable, so earlier entries stay ahead on equal scores
        self._data.entries = sorted(entries, key=lambda e: e.score, reverse=True)[: self.max_entries]
        if score > self._data.best_score:
            self._data.best_score = score
        self._save()
        return entry

    def snapshot(self) -> ScoreBoardData:
        return self._data.model_copy(deep=True)

    def _load(self) -> ScoreBoardData:
        if self.path is None or not self.path.exists():
            return ScoreBoardData()
        try:
            return ScoreBoardData.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable leaderboard file %s: %s", self.path, e)
            return ScoreBoardData()

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write beside the target, then swap it in.
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(self._data.model_dump_json(indent=2))
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
