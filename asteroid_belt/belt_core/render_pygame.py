"""
Pygame Renderer
===============

Draws frame snapshots: background, ship, asteroids, hearts, HUD text and
life indicators. Supports both display mode (human play) and headless RGB
output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from asteroid_belt.belt_core.config_loader import GameConfig, get_config
from asteroid_belt.belt_core.entities import EntityKind
from asteroid_belt.belt_core.state_snapshot import EntityView, FrameSnapshot

ASSETS_DIR = Path(__file__).parent.parent / "assets"

HEART_SPRITE = "heart.png"
EXTRA_HEART_SPRITE = "blueheart.png"
BACKGROUND_IMAGE = "planets.jpg"

# Life indicator layout (top-right corner, right to left)
HEART_SIZE = 48
HEART_SPACING = 10
HEART_MARGIN = 10


def life_indicator_positions(lives: int, surface_width: int) -> Tuple[int, ...]:
    """X coordinates of each life indicator, rightmost first."""
    start_x = surface_width - HEART_MARGIN
    return tuple(
        start_x - (i + 1) * (HEART_SIZE + HEART_SPACING)
        for i in range(max(0, lives))
    )


class PygameRenderer:
    """
    Renderer using pygame.

    Supports:
    - Sprite-based entity rendering with flat-shape fallback
    - Score / high score / help text overlay
    - Regular and extra life hearts
    - Screen display for human mode
    - RGB array output for agents
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        assets_dir: Optional[Path] = None,
        use_sprites: bool = True
    ):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            assets_dir: Directory containing sprite images. Uses the packaged
                asteroid_belt/assets directory if None; missing images are
                drawn as flat shapes.
            use_sprites: Whether to load and use sprite graphics.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config
        self._assets_dir = Path(assets_dir) if assets_dir is not None else ASSETS_DIR
        self._use_sprites = use_sprites

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None

        pygame.font.init()
        self._font = pygame.font.SysFont("Arial", 18, bold=True)
        self._font_large = pygame.font.SysFont("Arial", 48, bold=True)

        # Colors
        self._bg_color = (0, 0, 0)
        self._text_color = (255, 255, 255)
        self._ship_color = (200, 200, 220)
        self._asteroid_color = (130, 110, 90)
        self._heart_color = (220, 40, 60)
        self._extra_heart_color = (60, 120, 230)

        self._images: Dict[str, pygame.Surface] = {}
        self._scaled_cache: Dict[Tuple[str, int, int], pygame.Surface] = {}
        if use_sprites:
            self._load_images()

    def _load_images(self) -> None:
        """Load sprite images; missing files fall back to flat shapes."""
        names = {
            self._config.player.sprite,
            self._config.obstacle.sprite,
            self._config.pickup.sprite,
            HEART_SPRITE,
            EXTRA_HEART_SPRITE,
            BACKGROUND_IMAGE,
        }
        for name in names:
            if not name:
                continue
            path = self._assets_dir / name
            if not path.exists():
                continue
            try:
                image = pygame.image.load(str(path))
                if pygame.display.get_surface() is not None:
                    image = image.convert_alpha()
                self._images[name] = image
            except pygame.error:
                # Silent fail - will use fallback shapes
                pass

    def sprite_sizes(self) -> Dict[str, Tuple[int, int]]:
        """Native (width, height) of every loaded sprite."""
        return {name: image.get_size() for name, image in self._images.items()}

    def _get_scaled(self, name: str, width: int, height: int) -> Optional[pygame.Surface]:
        image = self._images.get(name)
        if image is None:
            return None
        key = (name, width, height)
        if key not in self._scaled_cache:
            self._scaled_cache[key] = pygame.transform.smoothscale(image, (width, height))
        return self._scaled_cache[key]

    def render(self, snapshot: FrameSnapshot) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Returns:
            (field_height, field_width, 3) uint8 array.
        """
        surface = pygame.Surface((snapshot.field_width, snapshot.field_height))
        self.draw(surface, snapshot)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        snapshot: FrameSnapshot,
        game_over: bool = False
    ) -> None:
        """Render to a display window, creating it on first use."""
        if self._screen is None:
            self._screen = pygame.display.set_mode((snapshot.field_width, snapshot.field_height))
            pygame.display.set_caption("Asteroid Belt")

        self.draw(self._screen, snapshot, game_over=game_over)
        pygame.display.flip()

    def draw(
        self,
        surface: pygame.Surface,
        snapshot: FrameSnapshot,
        game_over: bool = False
    ) -> None:
        """Draw the complete scene onto surface."""
        self._draw_background(surface)

        if snapshot.player is not None:
            self._draw_entity(surface, snapshot.player)
        for view in snapshot.objects:
            self._draw_entity(surface, view)

        self._draw_hud(surface, snapshot)
        self._draw_lives(surface, snapshot)

        if game_over:
            self._draw_game_over(surface, snapshot.score)

    def _draw_background(self, surface: pygame.Surface) -> None:
        width, height = surface.get_size()
        background = self._get_scaled(BACKGROUND_IMAGE, width, height)
        if background is not None:
            surface.blit(background, (0, 0))
        else:
            surface.fill(self._bg_color)

    def _draw_entity(self, surface: pygame.Surface, view: EntityView) -> None:
        sprite = self._get_scaled(view.sprite, view.width, view.height) if view.sprite else None
        if sprite is not None:
            surface.blit(sprite, (view.x, view.y))
            return

        rect = pygame.Rect(view.x, view.y, view.width, view.height)
        if view.kind is EntityKind.PLAYER:
            pygame.draw.polygon(surface, self._ship_color, [
                (rect.centerx, rect.top),
                (rect.left, rect.bottom),
                (rect.right, rect.bottom),
            ])
        elif view.kind is EntityKind.OBSTACLE:
            pygame.draw.ellipse(surface, self._asteroid_color, rect)
        else:
            pygame.draw.ellipse(surface, self._extra_heart_color, rect)

    def _draw_hud(self, surface: pygame.Surface, snapshot: FrameSnapshot) -> None:
        width, height = surface.get_size()
        high = self._font.render(f"High Score: {snapshot.high_score}", True, self._text_color)
        surface.blit(high, (width // 2 - 70, 8))

        score = self._font.render(f"Score: {snapshot.score}", True, self._text_color)
        surface.blit(score, (10, 8))

        hint = self._font.render("Press ESC to return to menu", True, self._text_color)
        surface.blit(hint, (10, height - hint.get_height() - 6))

    def _draw_lives(self, surface: pygame.Surface, snapshot: FrameSnapshot) -> None:
        """First base_life_indicators lives as red hearts, extras as blue."""
        regular, _ = snapshot.life_indicators
        positions = life_indicator_positions(snapshot.lives, surface.get_width())

        for i, x in enumerate(positions):
            name = HEART_SPRITE if i < regular else EXTRA_HEART_SPRITE
            heart = self._get_scaled(name, HEART_SIZE, HEART_SIZE)
            if heart is not None:
                surface.blit(heart, (x, HEART_MARGIN))
            else:
                color = self._heart_color if i < regular else self._extra_heart_color
                pygame.draw.circle(
                    surface, color,
                    (x + HEART_SIZE // 2, HEART_MARGIN + HEART_SIZE // 2),
                    HEART_SIZE // 2 - 4
                )

    def _draw_game_over(self, surface: pygame.Surface, score: int) -> None:
        """Draw game over overlay."""
        width, height = surface.get_size()
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        surface.blit(overlay, (0, 0))

        title = self._font_large.render("GAME OVER", True, self._text_color)
        surface.blit(title, ((width - title.get_width()) // 2, height // 2 - 60))

        text = self._font.render(f"Game Over! Your score: {score}", True, self._text_color)
        surface.blit(text, ((width - text.get_width()) // 2, height // 2 + 5))

        hint = self._font.render("Press R to play again or ESC for the menu", True, self._text_color)
        surface.blit(hint, ((width - hint.get_width()) // 2, height // 2 + 35))

    def close(self) -> None:
        """Close the display window if one was opened."""
        if self._screen is not None:
            pygame.display.quit()
            self._screen = None
