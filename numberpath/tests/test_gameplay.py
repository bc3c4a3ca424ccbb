import json
import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from numberpath import demo
from numberpath.game import (
    GridPosition,
    InvalidLevel,
    Level,
    LevelLoader,
    ModifierConfig,
    ModifierEffect,
    NumberPathGame,
    SolutionValidator,
    TargetConfig,
    TargetStatus,
)

P = GridPosition

BUNDLED_LEVELS = [
    "level_intro",
    "level_two_targets",
    "level_multiplier",
    "level_stride",
    "level_reset_gate",
]

SIX_STEP_WALK = [P(2, 2), P(3, 2), P(3, 3), P(3, 4), P(2, 4), P(1, 4), P(1, 3)]


def fixture_path(*parts: str) -> Path:
    return Path(__file__).resolve().parents[1].joinpath(*parts)


def drag(game: NumberPathGame, *positions: GridPosition) -> None:
    game.start(positions[0])
    for position in positions[1:]:
        game.extend(position)


def test_short_path_does_not_solve_default_level():
    game = NumberPathGame.default()
    drag(game, P(2, 2), P(2, 3), P(1, 3))

    assert game.values == (0, 1, 2)
    assert game.number_for_position(P(1, 3)) == 2
    assert game.target_status(P(1, 3)) is TargetStatus.NOT_MET
    assert not game.is_complete


def test_six_step_walk_solves_default_level():
    game = NumberPathGame.default()
    drag(game, *SIX_STEP_WALK)

    assert game.value_at(6) == 6
    assert game.is_complete
    assert game.is_dragging


def test_undo_clears_completion():
    game = NumberPathGame.default()
    drag(game, *SIX_STEP_WALK)

    assert game.extend(P(1, 4))
    assert game.path == tuple(SIX_STEP_WALK[:-1])
    assert not game.is_complete


def test_undo_from_scenario_path():
    game = NumberPathGame.default()
    drag(game, P(2, 2), P(2, 3), P(1, 3))

    assert game.extend(P(2, 3))
    assert game.path == (P(2, 2), P(2, 3))
    assert game.values == (0, 1)


def test_start_on_non_start_tile_is_ignored():
    game = NumberPathGame.default()

    assert not game.start(P(0, 0))
    assert game.path == ()
    assert not game.is_dragging


def test_missing_pointer_position_is_ignored():
    game = NumberPathGame.default()
    drag(game, P(2, 2))

    assert not game.extend(None)
    assert game.path == (P(2, 2),)


def test_reset_clears_completion_and_drag():
    game = NumberPathGame.default()
    drag(game, *SIX_STEP_WALK)

    assert game.reset()
    assert game.path == ()
    assert game.values == ()
    assert not game.is_complete
    assert not game.is_dragging
    assert not game.reset()


def test_completion_survives_end_of_drag():
    game = NumberPathGame.default()
    drag(game, *SIX_STEP_WALK)

    assert game.end()
    assert game.is_complete
    assert not game.is_dragging


def test_value_at_out_of_range_raises():
    game = NumberPathGame.default()
    drag(game, P(2, 2))

    with pytest.raises(IndexError):
        game.value_at(1)


def test_load_level_resets_path(caplog: pytest.LogCaptureFixture):
    game = NumberPathGame.default()
    drag(game, P(2, 2), P(2, 3))
    other = Level.build(3, P(0, 0), [TargetConfig(P(0, 2), 2)], name="Tiny")

    with caplog.at_level(logging.INFO, logger="numberpath.game"):
        game.load_level(other)

    assert game.level is other
    assert game.path == ()
    assert not game.is_dragging
    assert "Tiny" in caplog.text


def test_queries_forward_to_level():
    level = Level.build(
        4,
        P(0, 0),
        [TargetConfig(P(3, 3), 6)],
        [ModifierConfig(P(1, 1), ModifierEffect.ADD, 2)],
    )
    game = NumberPathGame(level)

    assert game.tile_at(P(1, 1)).is_modifier
    assert list(game.targets()) == [P(3, 3)]
    assert list(game.modifiers()) == [P(1, 1)]
    assert game.number_for_position(P(1, 1)) is None


def test_playthrough_summary():
    game = NumberPathGame.default()
    summary = game.playthrough(SIX_STEP_WALK)

    assert summary["complete"] is True
    assert summary["values"] == [0, 1, 2, 3, 4, 5, 6]
    assert summary["path"][0] == [2, 2]
    assert summary["targets"] == [
        {"position": [1, 3], "required": 6, "assigned": 6, "met": True}
    ]
    assert summary["metadata"]["dimensions"] == "5x5"
    assert not game.is_dragging
    json.dumps(summary)


def test_playthrough_stops_at_invalid_moves():
    game = NumberPathGame.default()
    summary = game.playthrough([P(2, 2), P(2, 3), P(4, 4), P(1, 3)])

    assert summary["path"] == [[2, 2], [2, 3], [1, 3]]
    assert summary["complete"] is False


def test_loader_lists_bundled_levels():
    loader = LevelLoader(fixture_path("levels"))

    assert loader.available() == sorted(BUNDLED_LEVELS)


def test_level_intro_matches_default_level():
    level = LevelLoader(fixture_path("levels")).load("level_intro")

    assert level.name == "First Steps"
    assert dict(level.tiles) == dict(Level.default().tiles)


@pytest.mark.parametrize("level_name", BUNDLED_LEVELS)
def test_solution_validator_accepts_bundled_solutions(level_name: str):
    loader = LevelLoader(fixture_path("levels"))
    validator = SolutionValidator(loader, fixture_path("solutions"))

    assert validator.validate(level_name)


@pytest.mark.parametrize("level_name", BUNDLED_LEVELS)
def test_bundled_solutions_complete_levels(level_name: str):
    loader = LevelLoader(fixture_path("levels"))
    validator = SolutionValidator(loader, fixture_path("solutions"))

    level = loader.load(level_name)
    solution = validator.load_solution(level_name)
    game = validator.replay(level, solution)

    assert game.is_complete
    assert list(game.values) == solution.expected_values


def write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def test_validator_rejects_unsolved_path(tmp_path: Path):
    solutions = tmp_path / "solutions"
    solutions.mkdir()
    write_json(solutions / "level_intro.json", {"path": [[2, 2], [2, 3], [1, 3]]})
    validator = SolutionValidator(LevelLoader(fixture_path("levels")), solutions)

    assert not validator.validate("level_intro")


def test_validator_rejects_illegal_moves(tmp_path: Path):
    solutions = tmp_path / "solutions"
    solutions.mkdir()
    path = [[2, 2], [3, 2], [3, 3], [3, 4], [2, 4], [1, 4], [1, 3], [5, 5]]
    write_json(solutions / "level_intro.json", {"path": path})
    validator = SolutionValidator(LevelLoader(fixture_path("levels")), solutions)

    assert not validator.validate("level_intro")


def test_validator_checks_expected_values(tmp_path: Path):
    solutions = tmp_path / "solutions"
    solutions.mkdir()
    data = json.loads(fixture_path("solutions", "level_intro.json").read_text())
    data["expected_values"] = [0, 1, 2, 3, 4, 5, 7]
    write_json(solutions / "level_intro.json", data)
    validator = SolutionValidator(LevelLoader(fixture_path("levels")), solutions)

    assert not validator.validate("level_intro")


def test_missing_files_raise(tmp_path: Path):
    loader = LevelLoader(tmp_path)
    validator = SolutionValidator(loader, tmp_path)

    with pytest.raises(FileNotFoundError):
        loader.load("nope")
    with pytest.raises(FileNotFoundError):
        validator.load_solution("nope")


@pytest.mark.parametrize(
    "data, message",
    [
        ({"start": [0, 0]}, "missing field"),
        ({"grid_size": 3}, "missing field"),
        ({"grid_size": 3, "start": [0, 0], "targets": [{"position": [1, 1]}]}, "missing field"),
        ({"grid_size": 3, "start": [0]}, "malformed"),
        ({"grid_size": "big", "start": [0, 0]}, "malformed"),
        (
            {
                "grid_size": 3,
                "start": [0, 0],
                "modifiers": [{"position": [1, 1], "effect": "divide", "value": 2}],
            },
            "Unknown modifier effect",
        ),
        (
            {"grid_size": 3, "start": [0, 0], "targets": [{"position": [3, 3], "required": 1}]},
            "outside",
        ),
        ([1, 2, 3], "expected a JSON object"),
    ],
)
def test_loader_rejects_malformed_levels(tmp_path: Path, data: object, message: str):
    write_json(tmp_path / "broken.json", data)

    with pytest.raises(InvalidLevel, match=message):
        LevelLoader(tmp_path).load("broken")


def test_loader_accepts_legacy_effect_name(tmp_path: Path):
    write_json(
        tmp_path / "legacy.json",
        {
            "grid_size": 3,
            "start": [0, 0],
            "targets": [{"position": [0, 2], "required": 4}],
            "modifiers": [{"position": [0, 1], "effect": "SET_INCREMENT", "value": 3}],
        },
    )
    level = LevelLoader(tmp_path).load("legacy")
    game = NumberPathGame(level)
    game.playthrough([P(0, 0), P(0, 1), P(0, 2)])

    assert level.name == "legacy"
    assert level.difficulty == "Unknown"
    assert game.values == (0, 1, 4)
    assert game.is_complete


def test_demo_prints_solution(capsys: pytest.CaptureFixture[str]):
    exit_code = demo.main(["level_stride"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Long Stride" in output
    assert "(2, 4): 7" in output
    assert "Solved: yes" in output
