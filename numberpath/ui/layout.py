"""Layout constants and tile styling for the number path UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..game import GridPosition, NumberPathGame, TargetStatus

Color = Tuple[int, int, int]

# Tile metrics
TILE_SIZE: int = 64
TILE_SPACING: int = 8
TILE_BORDER_WIDTH: int = 3
TILE_CORNER_RADIUS: int = 12
BOARD_OUTER_PADDING: int = 32

# Text metrics
TILE_FONT_SIZE: int = 24
WIN_MESSAGE_FONT_SIZE: int = 32
STATUS_FONT_SIZE: int = 18
STATUS_BAR_HEIGHT: int = 72

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Color = (250, 250, 252)

START_BACKGROUND: Color = (0x4A, 0x90, 0xE2)
START_BORDER: Color = (0x2E, 0x5C, 0x8A)

PATH_BACKGROUND: Color = (0x7E, 0xC8, 0xE3)
PATH_BORDER: Color = (0x4A, 0x90, 0xE2)

TARGET_UNVISITED: Color = (0xFF, 0xB7, 0x4D)
TARGET_UNVISITED_BORDER: Color = (0xF5, 0x7C, 0x00)
TARGET_MET: Color = (0x4C, 0xAF, 0x50)
TARGET_MET_BORDER: Color = (0x38, 0x8E, 0x3C)
TARGET_NOT_MET: Color = (0xEF, 0x53, 0x50)
TARGET_NOT_MET_BORDER: Color = (0xC6, 0x28, 0x28)

EMPTY_BACKGROUND: Color = (0xF5, 0xF5, 0xF5)
EMPTY_BORDER: Color = (0xCC, 0xCC, 0xCC)

MODIFIER_BACKGROUND: Color = (0x5C, 0x6B, 0xC0)
MODIFIER_BORDER: Color = (0x39, 0x49, 0xAB)
MODIFIER_IN_PATH: Color = (0x7E, 0x88, 0xC3)
MODIFIER_IN_PATH_BORDER: Color = (0x5C, 0x6B, 0xC0)

TEXT_ACTIVE: Color = (255, 255, 255)
TEXT_INACTIVE: Color = (128, 128, 128)
WIN_MESSAGE_COLOR: Color = (0x4C, 0xAF, 0x50)


@dataclass(frozen=True)
class TileStyle:
    """Visual state of one tile as derived from the game."""

    background: Color
    border: Color
    text_color: Color
    label: str


def tile_style(game: NumberPathGame, position: GridPosition) -> TileStyle:
    """Map the tile at ``position`` to colours and a label."""

    tile = game.tile_at(position)
    number = game.number_for_position(position)
    in_path = number is not None

    if tile.is_start:
        return TileStyle(START_BACKGROUND, START_BORDER, TEXT_ACTIVE, "0")

    if tile.is_target:
        status = game.target_status(position)
        if status is TargetStatus.MET:
            return TileStyle(TARGET_MET, TARGET_MET_BORDER, TEXT_ACTIVE, str(number))
        if status is TargetStatus.NOT_MET:
            return TileStyle(TARGET_NOT_MET, TARGET_NOT_MET_BORDER, TEXT_ACTIVE, str(number))
        return TileStyle(TARGET_UNVISITED, TARGET_UNVISITED_BORDER, TEXT_ACTIVE, tile.label)

    if tile.is_modifier:
        if in_path:
            return TileStyle(MODIFIER_IN_PATH, MODIFIER_IN_PATH_BORDER, TEXT_ACTIVE, str(number))
        return TileStyle(MODIFIER_BACKGROUND, MODIFIER_BORDER, TEXT_ACTIVE, tile.label)

    if in_path:
        return TileStyle(PATH_BACKGROUND, PATH_BORDER, TEXT_ACTIVE, str(number))
    return TileStyle(EMPTY_BACKGROUND, EMPTY_BORDER, TEXT_INACTIVE, "")


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel rectangles for the major UI regions."""

    board: Tuple[int, int, int, int]
    status: Tuple[int, int, int, int]
    window: Tuple[int, int]


def board_extent(grid_size: int, tile_size: int = TILE_SIZE, spacing: int = TILE_SPACING) -> int:
    """Pixel width (and height) of a square board without outer padding."""

    if grid_size <= 0:
        return 0
    return grid_size * tile_size + (grid_size - 1) * spacing


def compute_geometry(grid_size: int) -> BoardGeometry:
    """Compute useful rectangles for rendering the game window."""

    extent = board_extent(grid_size)
    board_x = BOARD_OUTER_PADDING
    board_y = BOARD_OUTER_PADDING + STATUS_BAR_HEIGHT

    status_rect = (BOARD_OUTER_PADDING, BOARD_OUTER_PADDING, extent, STATUS_BAR_HEIGHT)
    board_rect = (board_x, board_y, extent, extent)

    window_width = board_x + extent + BOARD_OUTER_PADDING
    window_height = board_y + extent + BOARD_OUTER_PADDING

    return BoardGeometry(
        board=board_rect,
        status=status_rect,
        window=(window_width, window_height),
    )
