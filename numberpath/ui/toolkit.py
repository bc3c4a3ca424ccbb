"""Minimal pygame based UI helpers for headless testing.

This module keeps the rendering deterministic so it can be exercised in
automated tests using the SDL ``dummy`` video driver.  It is also the
collaborator that turns pointer coordinates into grid positions for the
game session; the session itself never sees pixels.
"""

from __future__ import annotations

import os
from typing import Iterable, Optional, Tuple

from ..game import GridPosition, NumberPathGame
from . import layout


# Pygame is optional for the library but required for the UI helpers.  The
# import is performed lazily in ``ensure_pygame`` so test environments can
# control the SDL configuration (e.g. select the ``dummy`` video driver).
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


def grid_from_pixel(
    pos: Tuple[int, int],
    grid_size: int,
    *,
    cell_size: int = layout.TILE_SIZE,
    spacing: int = layout.TILE_SPACING,
    origin: Tuple[int, int] = (0, 0),
) -> Optional[GridPosition]:
    """Return the tile under ``pos`` or ``None`` for gaps and the outside."""

    x = pos[0] - origin[0]
    y = pos[1] - origin[1]
    if x < 0 or y < 0:
        return None
    pitch = cell_size + spacing
    row, y_in_tile = divmod(int(y), pitch)
    col, x_in_tile = divmod(int(x), pitch)
    if row >= grid_size or col >= grid_size:
        return None
    if x_in_tile >= cell_size or y_in_tile >= cell_size:
        return None
    return GridPosition(row, col)


class NumberPathUI:
    """Small pygame driven wrapper that feeds pointer input to a game."""

    def __init__(
        self,
        game: NumberPathGame,
        *,
        cell_size: int = layout.TILE_SIZE,
        spacing: int = layout.TILE_SPACING,
        origin: Tuple[int, int] = (0, 0),
        surface=None,
        use_display: bool = False,
    ) -> None:
        pygame = ensure_pygame()
        self.game = game
        self.cell_size = cell_size
        self.spacing = spacing
        self.origin = origin
        extent = self.board_extent
        self.surface = surface or pygame.Surface((extent, extent))
        self.screen = None
        if use_display:
            self.screen = pygame.display.set_mode((extent, extent))
        # Fonts are initialised with the default pygame font to keep rendering
        # deterministic across environments.
        font_size = max(10, int(layout.TILE_FONT_SIZE * cell_size / layout.TILE_SIZE))
        self.font = pygame.font.Font(pygame.font.get_default_font(), font_size)

    @property
    def board_extent(self) -> int:
        return layout.board_extent(self.game.level.grid_size, self.cell_size, self.spacing)

    # ------------------------------------------------------------------
    # Input handling
    def grid_from_pixel(self, pos: Tuple[int, int]) -> Optional[GridPosition]:
        return grid_from_pixel(
            pos,
            self.game.level.grid_size,
            cell_size=self.cell_size,
            spacing=self.spacing,
            origin=self.origin,
        )

    def process_events(self, events: Iterable[object]) -> bool:
        """Forward pointer and key events; return True if the game changed."""

        pygame = ensure_pygame()
        changed = False
        for event in events:
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                position = self.grid_from_pixel(event.pos)
                if position is not None:
                    changed = self.game.start(position) or changed
            elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
                position = self.grid_from_pixel(event.pos)
                if position is not None:
                    changed = self.game.extend(position) or changed
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                changed = self.game.end() or changed
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_r:
                changed = self.game.reset() or changed
        return changed

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        pygame = ensure_pygame()
        self.surface.fill(layout.BACKGROUND_COLOR)
        for position in self.game.level.positions():
            self._draw_tile(position)
        if self.screen:
            self.screen.blit(self.surface, (0, 0))
            pygame.display.flip()
        return self.surface

    def tile_rect(self, position: GridPosition):
        pygame = ensure_pygame()
        pitch = self.cell_size + self.spacing
        return pygame.Rect(
            position.col * pitch,
            position.row * pitch,
            self.cell_size,
            self.cell_size,
        )

    def _draw_tile(self, position: GridPosition) -> None:
        pygame = ensure_pygame()
        style = layout.tile_style(self.game, position)
        rect = self.tile_rect(position)
        radius = max(2, int(layout.TILE_CORNER_RADIUS * self.cell_size / layout.TILE_SIZE))
        pygame.draw.rect(self.surface, style.background, rect, border_radius=radius)
        pygame.draw.rect(
            self.surface,
            style.border,
            rect,
            layout.TILE_BORDER_WIDTH,
            border_radius=radius,
        )
        if style.label:
            label = self.font.render(style.label, True, style.text_color)
            label_rect = label.get_rect()
            label_rect.center = rect.center
            self.surface.blit(label, label_rect)


__all__ = ["NumberPathUI", "ensure_pygame", "grid_from_pixel"]
