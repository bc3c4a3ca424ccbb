"""User interface package for the number path puzzle."""

from .main import (
    LEVEL_ENV_VAR,
    SOLUTION_ENV_VAR,
    NumberPathApp,
    UIDirectories,
    main,
    resolve_directories,
    run,
)
from .toolkit import NumberPathUI, grid_from_pixel

__all__ = [
    "LEVEL_ENV_VAR",
    "SOLUTION_ENV_VAR",
    "UIDirectories",
    "NumberPathApp",
    "NumberPathUI",
    "grid_from_pixel",
    "main",
    "resolve_directories",
    "run",
]
