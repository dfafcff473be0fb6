"""
Human Play Mode
===============

Play Asteroid Belt interactively with the keyboard at a fixed tick rate.

Controls:
    - Left/Right or A/D: Move ship
    - Enter/Space: Start game (from the menu)
    - R: Restart game
    - ESC: Return to menu (quit from the menu)

Usage:
    python -m tools.play_human [--seed SEED] [--user NAME --password PASS]
    python -m tools.play_human --register NAME PASS PASS
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from asteroid_belt.belt_core.config_loader import load_config, GameConfig
from asteroid_belt.belt_core.credentials import CredentialStore, RegistrationError
from asteroid_belt.belt_core.game import CoreGame, GameState, InputState, SessionSummary
from asteroid_belt.belt_core.rules import REASON_QUIT
from asteroid_belt.belt_core.score_store import ScoreHistory


class HumanPlayer:
    """
    Keyboard-driven Asteroid Belt session with a simple menu state.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scores_path: Optional[str] = None,
        assets_dir: Optional[str] = None
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed

        pygame.init()
        self._screen = pygame.display.set_mode((config.field.width, config.field.height))
        pygame.display.set_caption("Asteroid Belt")
        self._clock = pygame.time.Clock()

        from asteroid_belt.belt_core.render_pygame import PygameRenderer
        self._renderer = PygameRenderer(config, assets_dir=assets_dir)
        self._menu_font = pygame.font.SysFont("Arial", 28, bold=True)

        self._game = CoreGame(
            config=config,
            seed=seed,
            score_history=ScoreHistory(scores_path, config=config),
            session_end_callback=self._on_session_end,
            sprite_sizes=self._renderer.sprite_sizes()
        )

        self._running = True
        self._in_menu = True
        self._last_summary: Optional[SessionSummary] = None

    @property
    def game(self) -> CoreGame:
        return self._game

    @property
    def running(self) -> bool:
        """False once the player has asked to exit."""
        return self._running

    @property
    def in_menu(self) -> bool:
        """True while the menu screen is shown instead of the play field."""
        return self._in_menu

    def run(self) -> int:
        """Run the game loop. Returns the last final score."""
        print("=== Asteroid Belt ===")
        print("Left/Right or A/D to move, ESC to return to menu")
        print()

        while self._running:
            self._handle_events()

            if self._game.is_running:
                self._game.tick(self._read_controls())

            self._render()
            self._clock.tick(self._config.loop.target_fps)

        self._game.quit_session()
        pygame.quit()
        return self._last_summary.final_score if self._last_summary else 0

    def _read_controls(self) -> InputState:
        keys = pygame.key.get_pressed()
        return InputState(
            move_left=bool(keys[pygame.K_LEFT] or keys[pygame.K_a]),
            move_right=bool(keys[pygame.K_RIGHT] or keys[pygame.K_d])
        )

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_key(self, key: int) -> None:
        """
        Apply one key press.

        ESC leaves a running or finished game for the menu, and exits only
        from the menu itself. R restarts at any time; Enter/Space start a
        game from the menu.
        """
        if key == pygame.K_ESCAPE:
            if self._in_menu:
                self._running = False
            else:
                self._game.quit_session()
                self._in_menu = True
        elif key == pygame.K_r:
            self._start()
        elif key in (pygame.K_RETURN, pygame.K_SPACE):
            if self._in_menu:
                self._start()

    def _start(self) -> None:
        self._game.start_session()
        self._in_menu = False
        print("\n=== Game Started ===\n")

    def _on_session_end(self, summary: SessionSummary) -> None:
        self._last_summary = summary
        if summary.reason == REASON_QUIT:
            print(f"Returned to menu - Score: {summary.final_score}")
            return
        print(f"\nGame Over! Your score: {summary.final_score}")
        if summary.new_record:
            print(f"New high score: {summary.high_score}")
        if not summary.persisted:
            print("Warning: score could not be saved")

    def _render(self) -> None:
        """Render the game or the menu."""
        if self._in_menu:
            if self._last_summary is None:
                self._draw_menu("Press ENTER to start")
            else:
                self._draw_menu("Press ENTER to play again")
        else:
            self._renderer.draw(
                self._screen,
                self._game.snapshot(),
                game_over=self._game.state is GameState.GAME_OVER
            )
        pygame.display.flip()

    def _draw_menu(self, prompt: str) -> None:
        self._screen.fill((64, 64, 64))
        width, height = self._screen.get_size()
        lines = [
            "Asteroid Belt",
            f"High Score: {self._game.high_score}",
            prompt,
            "ESC to quit",
        ]
        for i, line in enumerate(lines):
            text = self._menu_font.render(line, True, (255, 255, 255))
            self._screen.blit(text, ((width - text.get_width()) // 2, height // 3 + i * 50))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Play Asteroid Belt interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--scores", type=str, default=None, help="Score history file")
    parser.add_argument("--assets", type=str, default=None, help="Sprite directory")
    parser.add_argument("--user", type=str, default=None, help="Username to log in with")
    parser.add_argument("--password", type=str, default="", help="Password for --user")
    parser.add_argument(
        "--register", nargs=3, metavar=("USER", "PASSWORD", "CONFIRM"),
        help="Create an account and exit"
    )
    parser.add_argument("--verbose", action="store_true", help="Show core debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s"
    )

    config = load_config(args.config)
    credentials = CredentialStore(config=config)

    if args.register:
        try:
            credentials.register(*args.register)
        except RegistrationError as e:
            print(f"Registration Failed: {e}")
            return 1
        print("Registration successful! You can now login.")
        return 0

    if args.user is not None:
        if not args.user.strip() or not args.password:
            print("Login Failed: Please enter both username and password")
            return 1
        if not credentials.validate_login(args.user.strip(), args.password):
            print("Login Failed: Invalid username or password")
            return 1

    try:
        player = HumanPlayer(
            config=config, seed=args.seed, scores_path=args.scores, assets_dir=args.assets
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
