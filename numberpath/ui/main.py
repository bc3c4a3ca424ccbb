"""Interactive UI for playing number path levels using pygame."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..game import InvalidLevel, Level, LevelLoader, NumberPathGame
from . import layout
from .toolkit import NumberPathUI, ensure_pygame

LEVEL_ENV_VAR = "NUMBER_PATH_LEVEL_ROOT"
SOLUTION_ENV_VAR = "NUMBER_PATH_SOLUTION_ROOT"

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@dataclass(frozen=True)
class UIDirectories:
    """Bundle with resolved directories required by the UI."""

    level_root: Path
    solution_root: Path


def _default_level_root() -> Path:
    return Path(__file__).resolve().parents[1] / "levels"


def _default_solution_root() -> Path:
    return Path(__file__).resolve().parents[1] / "solutions"


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> UIDirectories:
    """Resolve UI directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if a resolved directory does
        not exist on disk. Disable this in contexts where you want to inspect the
        chosen paths without touching the filesystem.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, _default_level_root())
    solution_root = _read_directory(SOLUTION_ENV_VAR, _default_solution_root())

    if check_exists:
        missing = [path for path in (level_root, solution_root) if not path.exists()]
        if missing:
            missing_str = ", ".join(str(path) for path in missing)
            raise FileNotFoundError(
                f"Required resource directories do not exist: {missing_str}"
            )

    return UIDirectories(level_root=level_root, solution_root=solution_root)


class NumberPathApp:
    """Pygame driven application for the number path puzzle."""

    def __init__(
        self,
        *,
        directories: Optional[UIDirectories] = None,
        level_name: Optional[str] = None,
    ) -> None:
        self.directories = directories or resolve_directories()
        self.level_loader = LevelLoader(self.directories.level_root)
        self.level_names: List[str] = self.level_loader.available()
        if not self.level_names:
            raise RuntimeError("No levels available to load.")

        self.level_index = 0
        if level_name is not None:
            if level_name not in self.level_names:
                raise FileNotFoundError(self.directories.level_root / f"{level_name}.json")
            self.level_index = self.level_names.index(level_name)

        pygame = ensure_pygame()
        pygame.display.set_caption("Number Path")
        self.game = NumberPathGame(self._load(self.level_index))
        self.geometry = layout.compute_geometry(self.game.level.grid_size)
        self.screen = pygame.display.set_mode(self.geometry.window)
        self.clock = pygame.time.Clock()
        default_font = pygame.font.get_default_font()
        self.status_font = pygame.font.Font(default_font, layout.STATUS_FONT_SIZE)
        self.win_font = pygame.font.Font(default_font, layout.WIN_MESSAGE_FONT_SIZE)
        self.board = self._make_board()

    def _load(self, index: int) -> Level:
        name = self.level_names[index]
        try:
            return self.level_loader.load(name)
        except InvalidLevel:
            logger.error("Level %s is invalid", name)
            raise

    def _make_board(self) -> NumberPathUI:
        board_x, board_y, _, _ = self.geometry.board
        return NumberPathUI(self.game, origin=(board_x, board_y))

    def cycle_level(self, direction: int) -> None:
        pygame = ensure_pygame()
        self.level_index = (self.level_index + direction) % len(self.level_names)
        self.game.load_level(self._load(self.level_index))
        self.geometry = layout.compute_geometry(self.game.level.grid_size)
        self.screen = pygame.display.set_mode(self.geometry.window)
        self.board = self._make_board()

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------
    def handle_event(self, event) -> None:
        pygame = ensure_pygame()
        if event.type == pygame.QUIT:
            raise SystemExit
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                raise SystemExit
            if event.key in (pygame.K_RIGHT, pygame.K_n):
                self.cycle_level(1)
                return
            if event.key in (pygame.K_LEFT, pygame.K_p):
                self.cycle_level(-1)
                return
        was_complete = self.game.is_complete
        self.board.process_events([event])
        if self.game.is_complete and not was_complete:
            logger.info("Solved %s", self.game.level.name)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw(self) -> None:
        pygame = ensure_pygame()
        self.screen.fill(layout.BACKGROUND_COLOR)
        status_x, status_y, status_width, _ = self.geometry.status
        if self.game.is_complete:
            message = self.win_font.render("Solved!", True, layout.WIN_MESSAGE_COLOR)
        else:
            meta = self.game.level.metadata
            text = f"{meta['name']} ({meta['difficulty']})  N/P: level  R: reset"
            message = self.status_font.render(text, True, layout.TEXT_INACTIVE)
        rect = message.get_rect()
        rect.midtop = (status_x + status_width // 2, status_y)
        self.screen.blit(message, rect)

        board_x, board_y, _, _ = self.geometry.board
        self.screen.blit(self.board.render(), (board_x, board_y))
        pygame.display.flip()

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        pygame = ensure_pygame()
        while True:
            for event in pygame.event.get():
                try:
                    self.handle_event(event)
                except SystemExit:
                    pygame.quit()
                    return
            self.draw()
            self.clock.tick(60)


def run(level_name: Optional[str] = None) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = NumberPathApp(level_name=level_name)
    app.run()


def bootstrap_directories() -> UIDirectories:
    """Return resolved directories and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Number Path UI bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  solutions: {directories.solution_root}\n"
        f"Set {LEVEL_ENV_VAR} or {SOLUTION_ENV_VAR} to point to custom directories if needed."
    )
    print(message)
    return directories


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Number Path UI launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource directories and exit without launching the UI.",
    )
    parser.add_argument(
        "--list-levels",
        action="store_true",
        help="List the available levels and exit.",
    )
    parser.add_argument("--level", help="Name of the level to open first.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.info:
        bootstrap_directories()
        return 0
    if args.list_levels:
        directories = resolve_directories()
        loader = LevelLoader(directories.level_root)
        print("Available levels:")
        for name in loader.available():
            level = loader.load(name)
            print(f"  {name}: {level.name} [{level.difficulty}, {level.metadata['dimensions']}]")
        return 0

    bootstrap_directories()
    run(args.level)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    sys.exit(main())
