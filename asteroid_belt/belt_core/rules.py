"""
Game Rules
==========

Handles session termination: running out of lives or quitting to the menu.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from asteroid_belt.belt_core.config_loader import GameConfig, get_config


REASON_OUT_OF_LIVES = "out_of_lives"
REASON_QUIT = "quit"


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str
    persist: bool

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "", False)

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason, True)

    @staticmethod
    def quit(persist: bool) -> "TerminationResult":
        return TerminationResult(True, REASON_QUIT, persist)


class TerminationRules:
    """
    Handles session termination conditions.

    - Out of lives: game over, score is always persisted
    - Quit to menu: session ends, score persisted only if persist_on_quit
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._persist_on_quit = config.session.persist_on_quit

    @property
    def persist_on_quit(self) -> bool:
        """Whether quitting mid-session writes the score to history."""
        return self._persist_on_quit

    def check_termination(self, lives: int) -> TerminationResult:
        """
        Check the per-tick termination condition.

        Args:
            lives: Lives remaining after this tick's events.

        Returns:
            TerminationResult indicating game state.
        """
        if lives <= 0:
            return TerminationResult.game_over(REASON_OUT_OF_LIVES)
        return TerminationResult.none()

    def on_quit(self) -> TerminationResult:
        """Termination result for an explicit quit command."""
        return TerminationResult.quit(self._persist_on_quit)
