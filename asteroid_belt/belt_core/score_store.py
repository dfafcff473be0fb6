"""
Score History
=============

Append-only, line-based score file. One non-negative integer per line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from asteroid_belt.belt_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class ScoreHistory:
    """
    Score history backed by a plain text file.

    Reading never raises: a missing, unreadable, empty or malformed file is
    an empty history. Writing reports failure through its return value and
    a logged warning.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize score history.

        Args:
            path: Score file location. Uses storage.scores_path from config if None.
            config: Game configuration. Uses default if None.
        """
        if path is None:
            if config is None:
                config = get_config()
            path = config.storage.scores_path
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_scores(self) -> List[int]:
        """All scores in file order, or [] if any line is not a non-negative integer."""
        try:
            with open(self._path, "r") as f:
                lines = f.readlines()
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read score history %s: %s", self._path, e)
            return []

        scores = []
        for line_no, line in enumerate(lines, start=1):
            text = line.strip()
            if not text:
                continue
            try:
                value = int(text)
            except ValueError:
                value = -1
            if value < 0:
                # A corrupt file counts as no history at all
                logger.warning(
                    "Malformed score on line %d of %s: %r; ignoring history",
                    line_no, self._path, text
                )
                return []
            scores.append(value)
        return scores

    def load_high_score(self) -> int:
        """Highest recorded score, or 0 when there is no usable history."""
        return max(self.load_scores(), default=0)

    def append_score(self, score: int) -> bool:
        """
        Append a score as a new line.

        Args:
            score: Final session score.

        Returns:
            True if the write succeeded.
        """
        try:
            if not self._path.parent.exists():
                self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a") as f:
                f.write(f"{int(score)}\n")
        except OSError as e:
            logger.warning("Error saving score %d to %s: %s", score, self._path, e)
            return False
        return True


class MemoryScoreHistory(ScoreHistory):
    """Score history kept in a list; used by headless environments and tests."""

    def __init__(self, scores: Optional[List[int]] = None):
        self._path = Path("<memory>")
        self._scores: List[int] = list(scores or [])

    def load_scores(self) -> List[int]:
        return [s for s in self._scores if s >= 0]

    def append_score(self, score: int) -> bool:
        self._scores.append(int(score))
        return True
