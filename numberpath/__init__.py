"""Number Path puzzle package."""

from .game import (
    GridPosition,
    InvalidLevel,
    Level,
    LevelLoader,
    ModifierEffect,
    NumberPathGame,
    PathState,
    SolutionValidator,
    Tile,
)

__all__ = [
    "GridPosition",
    "InvalidLevel",
    "Level",
    "LevelLoader",
    "ModifierEffect",
    "NumberPathGame",
    "PathState",
    "SolutionValidator",
    "Tile",
]
