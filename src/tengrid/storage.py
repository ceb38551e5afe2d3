"""Best-score persistence.

The engine only reports new best scores through a callback; this module is
the collaborator that keeps them on disk between sessions.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Optional, Union

from tengrid.game import BlockPuzzleGame, GameConfig


logger = logging.getLogger(__name__)


DEFAULT_FILE = "best_score.json"


def default_path() -> Path:
    return Path(os.getenv("TENGRID_BEST_SCORE_FILE", DEFAULT_FILE))


class JsonBestScoreStore:
    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else default_path()
        self._lock = Lock()

    def load(self) -> int:
        with self._lock:
            return self._read()

    def _read(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8")) or {}
            return max(0, int(data.get("best_score", 0)))
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
            logger.warning("%s is corrupted, treating best score as 0", self.path)
            return 0

    def save(self, score: int) -> None:
        with self._lock:
            self._write(score)

    def _write(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps({"best_score": int(score)}, indent=2), encoding="utf-8")
        tmp.replace(self.path)
        logger.info("saved best score %d to %s", score, self.path)

    def record(self, score: int) -> bool:
        """Save `score` only if it beats the stored value. Returns True when written."""
        with self._lock:
            if score <= self._read():
                return False
            self._write(score)
            return True


def open_game(store: JsonBestScoreStore, config: Optional[GameConfig] = None) -> BlockPuzzleGame:
    """Create a game seeded with the stored best score that records every new best."""
    return BlockPuzzleGame(config, best_score=store.load(), on_best_score=store.record)
