"""Core game logic for the number path puzzle."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)


class InvalidLevel(ValueError):
    """Raised when a level definition violates the grid invariants."""


@dataclass(frozen=True, order=True)
class GridPosition:
    """Row/column coordinate on the square grid."""

    row: int
    col: int

    def is_adjacent_to(self, other: "GridPosition") -> bool:
        return abs(self.row - other.row) + abs(self.col - other.col) == 1

    def within_bounds(self, grid_size: int) -> bool:
        return 0 <= self.row < grid_size and 0 <= self.col < grid_size

    def neighbours(self) -> Tuple["GridPosition", ...]:
        return (
            GridPosition(self.row - 1, self.col),
            GridPosition(self.row, self.col + 1),
            GridPosition(self.row + 1, self.col),
            GridPosition(self.row, self.col - 1),
        )

    @classmethod
    def of(cls, value: Sequence[int]) -> "GridPosition":
        row, col = value
        return cls(int(row), int(col))

    def as_list(self) -> List[int]:
        return [self.row, self.col]


class TileType(Enum):
    EMPTY = "empty"
    START = "start"
    TARGET = "target"
    MODIFIER = "modifier"


class ModifierEffect(Enum):
    """How a modifier tile changes the running counter."""

    RESET = "reset"
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    CHANGE_STEP = "change_step"

    @staticmethod
    def from_name(name: str) -> "ModifierEffect":
        key = str(name).strip().lower().replace("-", "_")
        if key == "set_increment":
            return ModifierEffect.CHANGE_STEP
        try:
            return ModifierEffect(key)
        except ValueError as exc:
            raise InvalidLevel(f"Unknown modifier effect: {name}") from exc

    def apply(self, counter: int, step: int, value: int) -> Tuple[int, int]:
        """Return the ``(counter, step)`` pair after passing this modifier."""

        if self is ModifierEffect.RESET:
            return value, step
        if self is ModifierEffect.ADD:
            return counter + value, step
        if self is ModifierEffect.SUBTRACT:
            return counter - value, step
        if self is ModifierEffect.MULTIPLY:
            return counter * value, step
        # The step change only affects later plain moves; the tile itself
        # still advances with the old step.
        return counter + step, value

    def label(self, value: int) -> str:
        mapping = {
            ModifierEffect.RESET: f"={value}",
            ModifierEffect.ADD: f"+{value}",
            ModifierEffect.SUBTRACT: f"-{value}",
            ModifierEffect.MULTIPLY: f"x{value}",
            ModifierEffect.CHANGE_STEP: f"step {value}",
        }
        return mapping[self]


@dataclass(frozen=True)
class Tile:
    """Content of a single grid cell."""

    kind: TileType = TileType.EMPTY
    required_number: Optional[int] = None
    effect: Optional[ModifierEffect] = None
    value: int = 0

    @classmethod
    def empty(cls) -> "Tile":
        return cls()

    @classmethod
    def start(cls) -> "Tile":
        return cls(kind=TileType.START)

    @classmethod
    def target(cls, required_number: int) -> "Tile":
        return cls(kind=TileType.TARGET, required_number=int(required_number))

    @classmethod
    def modifier(cls, effect: ModifierEffect, value: int = 0) -> "Tile":
        return cls(kind=TileType.MODIFIER, effect=effect, value=int(value))

    @property
    def is_start(self) -> bool:
        return self.kind is TileType.START

    @property
    def is_target(self) -> bool:
        return self.kind is TileType.TARGET

    @property
    def is_modifier(self) -> bool:
        return self.kind is TileType.MODIFIER

    @property
    def label(self) -> str:
        if self.is_modifier and self.effect is not None:
            return self.effect.label(self.value)
        if self.is_target:
            return str(self.required_number)
        if self.is_start:
            return "0"
        return ""


EMPTY_TILE = Tile.empty()


@dataclass(frozen=True)
class TargetConfig:
    position: GridPosition
    required_number: int


@dataclass(frozen=True)
class ModifierConfig:
    position: GridPosition
    effect: ModifierEffect
    value: int = 0


@dataclass(frozen=True)
class Level:
    """Immutable description of a puzzle grid.

    ``tiles`` only lists the non-empty cells; every other in-bounds cell is
    empty. Validation happens on construction and raises
    :class:`InvalidLevel`.
    """

    grid_size: int
    start_position: GridPosition
    tiles: Mapping[GridPosition, Tile]
    name: str = "Untitled"
    difficulty: str = "Unknown"

    def __post_init__(self) -> None:
        object.__setattr__(self, "tiles", MappingProxyType(dict(self.tiles)))
        self._validate()

    def _validate(self) -> None:
        if self.grid_size < 1:
            raise InvalidLevel(f"Grid size must be positive, got {self.grid_size}")
        if not self.inside(self.start_position):
            raise InvalidLevel(
                f"Start position {self.start_position} lies outside a "
                f"{self.grid_size}x{self.grid_size} grid"
            )
        starts: List[GridPosition] = []
        for position, tile in self.tiles.items():
            if not self.inside(position):
                raise InvalidLevel(
                    f"Tile at {position} lies outside a "
                    f"{self.grid_size}x{self.grid_size} grid"
                )
            if tile.is_start:
                starts.append(position)
            elif tile.is_target and tile.required_number is None:
                raise InvalidLevel(f"Target at {position} has no required number")
            elif tile.is_modifier and tile.effect is None:
                raise InvalidLevel(f"Modifier at {position} has no effect")
        if not starts:
            raise InvalidLevel("Level has no start tile")
        if len(starts) > 1:
            listed = ", ".join(str(position) for position in sorted(starts))
            raise InvalidLevel(f"Level has more than one start tile: {listed}")
        if starts[0] != self.start_position:
            raise InvalidLevel(
                f"Start tile at {starts[0]} does not match start position "
                f"{self.start_position}"
            )

    @classmethod
    def build(
        cls,
        grid_size: int,
        start_position: GridPosition,
        targets: Iterable[TargetConfig] = (),
        modifiers: Iterable[ModifierConfig] = (),
        *,
        name: str = "Untitled",
        difficulty: str = "Unknown",
    ) -> "Level":
        tiles: Dict[GridPosition, Tile] = {start_position: Tile.start()}
        for config in list(targets) + list(modifiers):
            if config.position in tiles:
                raise InvalidLevel(f"More than one tile configured at {config.position}")
            if isinstance(config, TargetConfig):
                tiles[config.position] = Tile.target(config.required_number)
            else:
                tiles[config.position] = Tile.modifier(config.effect, config.value)
        return cls(
            grid_size=grid_size,
            start_position=start_position,
            tiles=tiles,
            name=name,
            difficulty=difficulty,
        )

    @classmethod
    def create_simple_level(
        cls, grid_size: int = 5, targets: Iterable[TargetConfig] = ()
    ) -> "Level":
        centre = GridPosition(grid_size // 2, grid_size // 2)
        return cls.build(grid_size, centre, targets)

    @classmethod
    def default(cls) -> "Level":
        return cls.build(
            5,
            GridPosition(2, 2),
            [TargetConfig(GridPosition(1, 3), 6)],
            name="Default",
            difficulty="Easy",
        )

    @property
    def metadata(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "difficulty": self.difficulty,
            "dimensions": f"{self.grid_size}x{self.grid_size}",
            "targets": len(self.targets()),
            "modifiers": len(self.modifiers()),
        }

    def inside(self, position: GridPosition) -> bool:
        return position.within_bounds(self.grid_size)

    is_within_bounds = inside

    def tile_at(self, position: GridPosition) -> Tile:
        return self.tiles.get(position, EMPTY_TILE)

    def positions(self) -> Iterator[GridPosition]:
        for row in range(self.grid_size):
            for col in range(self.grid_size):
                yield GridPosition(row, col)

    def targets(self) -> Dict[GridPosition, Tile]:
        return {
            position: tile
            for position, tile in sorted(self.tiles.items())
            if tile.is_target
        }

    def modifiers(self) -> Dict[GridPosition, Tile]:
        return {
            position: tile
            for position, tile in sorted(self.tiles.items())
            if tile.is_modifier
        }


class PathState:
    """Ordered trail of visited positions plus the drag flag.

    All mutations return ``True`` when they changed the state and ``False``
    for rejected gestures; rejections never raise.
    """

    def __init__(self, level: Level):
        self.level = level
        self._positions: List[GridPosition] = []
        self.dragging = False

    @property
    def positions(self) -> Tuple[GridPosition, ...]:
        return tuple(self._positions)

    @property
    def last(self) -> Optional[GridPosition]:
        return self._positions[-1] if self._positions else None

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[GridPosition]:
        return iter(self._positions)

    def __contains__(self, position: object) -> bool:
        return position in self._positions

    def index_of(self, position: GridPosition) -> Optional[int]:
        try:
            return self._positions.index(position)
        except ValueError:
            return None

    def start(self, position: GridPosition) -> bool:
        if self.dragging:
            return False
        if self.level.tile_at(position).is_start:
            self._positions = [position]
            self.dragging = True
            return True
        if self._positions and position == self._positions[-1]:
            self.dragging = True
            return True
        return False

    def extend(self, position: GridPosition) -> bool:
        if not self.dragging or not self.level.inside(position):
            return False
        if len(self._positions) >= 2 and position == self._positions[-2]:
            self._positions.pop()
            return True
        if position in self._positions or not self._positions:
            return False
        if position.is_adjacent_to(self._positions[-1]):
            self._positions.append(position)
            return True
        return False

    def end(self) -> bool:
        was_dragging = self.dragging
        self.dragging = False
        return was_dragging

    def reset(self) -> bool:
        changed = bool(self._positions) or self.dragging
        self._positions = []
        self.dragging = False
        return changed


def counter_values(level: Level, positions: Sequence[GridPosition]) -> List[int]:
    """Compute the counter value of every path index in a single pass."""

    values: List[int] = []
    counter = 0
    step = 1
    for index, position in enumerate(positions):
        if index == 0:
            values.append(counter)
            continue
        tile = level.tile_at(position)
        if tile.is_modifier and tile.effect is not None:
            counter, step = tile.effect.apply(counter, step, tile.value)
        else:
            counter += step
        values.append(counter)
    return values


def value_at(level: Level, positions: Sequence[GridPosition], index: int) -> int:
    if not 0 <= index < len(positions):
        raise IndexError(f"Path index {index} out of range for a path of {len(positions)}")
    return counter_values(level, positions[: index + 1])[index]


class TargetStatus(Enum):
    UNVISITED = "unvisited"
    MET = "met"
    NOT_MET = "not_met"


def _assigned_value(
    level: Level,
    positions: Sequence[GridPosition],
    position: GridPosition,
    values: Optional[Sequence[int]] = None,
) -> Optional[int]:
    try:
        index = list(positions).index(position)
    except ValueError:
        return None
    if values is None:
        values = counter_values(level, positions)
    return values[index]


def target_status(
    level: Level,
    positions: Sequence[GridPosition],
    position: GridPosition,
    values: Optional[Sequence[int]] = None,
) -> Optional[TargetStatus]:
    """Status of the target at ``position``; ``None`` if it is no target."""

    tile = level.tile_at(position)
    if not tile.is_target:
        return None
    assigned = _assigned_value(level, positions, position, values)
    if assigned is None:
        return TargetStatus.UNVISITED
    if assigned == tile.required_number:
        return TargetStatus.MET
    return TargetStatus.NOT_MET


def is_target_met(
    level: Level,
    positions: Sequence[GridPosition],
    position: GridPosition,
    values: Optional[Sequence[int]] = None,
) -> bool:
    return target_status(level, positions, position, values) is TargetStatus.MET


def is_complete(
    level: Level,
    positions: Sequence[GridPosition],
    values: Optional[Sequence[int]] = None,
) -> bool:
    targets = level.targets()
    if not targets:
        return False
    if values is None:
        values = counter_values(level, positions)
    return all(
        is_target_met(level, positions, position, values) for position in targets
    )


class NumberPathGame:
    """Game session binding one level to its path and derived state."""

    def __init__(self, level: Level):
        self.level = level
        self.state = PathState(level)
        self._values: List[int] = []
        self._complete = False

    @classmethod
    def default(cls) -> "NumberPathGame":
        return cls(Level.default())

    # ------------------------------------------------------------------
    # Path mutations
    def start(self, position: GridPosition) -> bool:
        changed = self.state.start(position)
        if changed:
            self._refresh()
        return changed

    def extend(self, position: Optional[GridPosition]) -> bool:
        if position is None:
            return False
        changed = self.state.extend(position)
        if changed:
            self._refresh()
        return changed

    def end(self) -> bool:
        return self.state.end()

    def reset(self) -> bool:
        changed = self.state.reset()
        self._refresh()
        return changed

    def load_level(self, level: Level) -> None:
        self.level = level
        self.state = PathState(level)
        self._refresh()
        logger.info("Loaded level %r (%s)", level.name, level.metadata["dimensions"])

    def _refresh(self) -> None:
        positions = self.state.positions
        self._values = counter_values(self.level, positions)
        was_complete = self._complete
        self._complete = is_complete(self.level, positions, self._values)
        logger.debug("Path now %d long, values %s", len(positions), self._values)
        if self._complete and not was_complete:
            logger.debug("Level %r solved", self.level.name)

    # ------------------------------------------------------------------
    # Queries
    @property
    def path(self) -> Tuple[GridPosition, ...]:
        return self.state.positions

    @property
    def is_dragging(self) -> bool:
        return self.state.dragging

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(self._values)

    def value_at(self, index: int) -> int:
        if not 0 <= index < len(self._values):
            raise IndexError(
                f"Path index {index} out of range for a path of {len(self._values)}"
            )
        return self._values[index]

    def number_for_position(self, position: GridPosition) -> Optional[int]:
        index = self.state.index_of(position)
        if index is None:
            return None
        return self._values[index]

    def tile_at(self, position: GridPosition) -> Tile:
        return self.level.tile_at(position)

    def target_status(self, position: GridPosition) -> Optional[TargetStatus]:
        return target_status(self.level, self.path, position, self._values)

    def targets(self) -> Dict[GridPosition, Tile]:
        return self.level.targets()

    def modifiers(self) -> Dict[GridPosition, Tile]:
        return self.level.modifiers()

    # ------------------------------------------------------------------
    # Replays
    def playthrough(self, moves: Iterable[GridPosition]) -> Dict[str, object]:
        """Replay ``moves`` as one drag gesture and summarise the result."""

        self.reset()
        moves = list(moves)
        if moves:
            self.start(moves[0])
            for position in moves[1:]:
                self.extend(position)
            self.end()
        targets_payload = []
        for position, tile in self.targets().items():
            targets_payload.append(
                {
                    "position": position.as_list(),
                    "required": tile.required_number,
                    "assigned": self.number_for_position(position),
                    "met": self.target_status(position) is TargetStatus.MET,
                }
            )
        return {
            "path": [position.as_list() for position in self.path],
            "values": list(self._values),
            "targets": targets_payload,
            "complete": self._complete,
            "metadata": self.level.metadata,
        }


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def available(self) -> List[str]:
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> Level:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        level = self._parse_level(data, source=path.name)
        logger.info("Loaded level file %s", path)
        return level

    def _parse_level(self, data: Dict, source: str = "<memory>") -> Level:
        if not isinstance(data, dict):
            raise InvalidLevel(f"{source}: expected a JSON object")
        try:
            targets = [
                TargetConfig(
                    position=GridPosition.of(entry["position"]),
                    required_number=int(entry["required"]),
                )
                for entry in data.get("targets", [])
            ]
            modifiers = [
                ModifierConfig(
                    position=GridPosition.of(entry["position"]),
                    effect=ModifierEffect.from_name(entry["effect"]),
                    value=int(entry.get("value", 0)),
                )
                for entry in data.get("modifiers", [])
            ]
            return Level.build(
                int(data["grid_size"]),
                GridPosition.of(data["start"]),
                targets,
                modifiers,
                name=str(data.get("name", Path(source).stem)),
                difficulty=str(data.get("difficulty", "Unknown")),
            )
        except InvalidLevel as exc:
            raise InvalidLevel(f"{source}: {exc}") from exc
        except KeyError as exc:
            raise InvalidLevel(f"{source}: missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise InvalidLevel(f"{source}: malformed entry ({exc})") from exc


@dataclass
class Solution:
    """Recorded path that should solve a level."""

    path: List[GridPosition] = field(default_factory=list)
    expected_values: Optional[List[int]] = None


class SolutionValidator:
    """Validate that a solution file produces the expected completion state."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Path):
        self.level_loader = level_loader
        self.solutions_root = Path(solutions_root)

    def load_solution(self, name: str) -> Solution:
        path = self.solutions_root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        expected = data.get("expected_values")
        return Solution(
            path=[GridPosition.of(entry) for entry in data.get("path", [])],
            expected_values=[int(v) for v in expected] if expected is not None else None,
        )

    def replay(self, level: Level, solution: Solution) -> NumberPathGame:
        game = NumberPathGame(level)
        game.playthrough(solution.path)
        return game

    def validate(self, level_name: str, solution_name: Optional[str] = None) -> bool:
        level = self.level_loader.load(level_name)
        solution = self.load_solution(solution_name or level_name)
        game = self.replay(level, solution)
        if len(game.path) != len(solution.path):
            logger.debug("Solution for %s was cut short at %d moves", level_name, len(game.path))
            return False
        if solution.expected_values is not None:
            if list(game.values) != solution.expected_values:
                return False
        return game.is_complete
