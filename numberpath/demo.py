"""Simple command line demo for the number path logic."""

import sys
from pathlib import Path
from typing import List, Optional

from .game import LevelLoader, NumberPathGame, SolutionValidator


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    package_root = Path(__file__).resolve().parent
    level_loader = LevelLoader(package_root / "levels")
    validator = SolutionValidator(level_loader, package_root / "solutions")

    level_name = args[0] if args else "level_intro"
    level = level_loader.load(level_name)
    solution = validator.load_solution(level_name)

    game = NumberPathGame(level)
    results = game.playthrough(solution.path)

    print("=== Number Path Demo ===")
    print(f"Level: {results['metadata']['name']} ({results['metadata']['difficulty']})")
    print("Path values:")
    for position, value in zip(results["path"], results["values"]):
        print(f"  {tuple(position)}: {value}")
    print("Targets:")
    for target in results["targets"]:
        state = "met" if target["met"] else "open"
        print(
            f"  {tuple(target['position'])}: needs {target['required']}, "
            f"got {target['assigned']} ({state})"
        )
    print(f"Solved: {'yes' if results['complete'] else 'no'}")
    return 0 if results["complete"] else 1


if __name__ == "__main__":
    sys.exit(main())
