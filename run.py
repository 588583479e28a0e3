"""CLI entrypoint: load Magnets puzzle(s), run the solver, and report results."""

import argparse
import csv
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from solver import solve_puzzle
from src.magnets.loader import load_puzzles
from src.magnets.model import InferenceMode
from src.magnets.parser import parse_puzzle
from src.magnets.puzzle import MagnetsPuzzle
from src.magnets.render import board_rows, format_board
from src.utils.trace import get_tracer, reset_tracer

PUZZLE_SUFFIXES = [".txt", ".json", ".jsonl", ".parquet", ".csv"]


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Solve Magnets puzzles with a backtracking CSP solver")
    parser.add_argument("input", type=Path, help="Path to a puzzle file or a directory of puzzles")
    parser.add_argument("--output", type=Path, default=None, help="Optional CSV path for results")
    parser.add_argument(
        "--inference",
        choices=[mode.value for mode in InferenceMode],
        default=os.environ.get("MAGNETS_INFERENCE", InferenceMode.ARC_CONSISTENCY.value),
        help="Propagation strategy: forward checking (fc) or arc consistency (mac). "
        "Defaults to $MAGNETS_INFERENCE or 'mac'.",
    )
    parser.add_argument(
        "--node-budget",
        type=int,
        default=None,
        help="Give up after this many search nodes (unlimited if omitted).",
    )
    parser.add_argument(
        "--trace-dir",
        type=Path,
        default=None,
        help="Optional directory receiving one trace CSV per puzzle.",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not print solved boards")
    return parser.parse_args(argv)


def format_solution(puzzle: Optional[MagnetsPuzzle], solution, *, budget_exhausted: bool = False) -> Dict[str, Any]:
    if puzzle is None:
        return {"status": "error", "rows": []}
    if solution is None:
        status = "budget_exhausted" if budget_exhausted else "unsolved"
        return {"status": status, "rows": []}
    return {"status": "solved", "rows": board_rows(puzzle)}


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "status", "grid_solution", "steps"])

        for r in results:
            writer.writerow([
                r["id"],
                r["status"],
                json.dumps(r["grid_solution"], separators=(",", ":")),
                r["steps"],
            ])


def _collect_puzzles(input_path: Path) -> List[Dict[str, Any]]:
    if input_path.is_file():
        return load_puzzles(str(input_path))
    if input_path.is_dir():
        puzzles: List[Dict[str, Any]] = []
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in PUZZLE_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
        return puzzles
    raise ValueError(f"Input path {input_path} is neither file nor directory")


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    puzzles = _collect_puzzles(args.input)
    results = []

    for record in puzzles:
        reset_tracer()
        tracer = get_tracer()
        puzzle_id = record.get("id", "unknown")
        magnets: Optional[MagnetsPuzzle] = None

        try:
            magnets = parse_puzzle(record, inference=args.inference)
            solution = solve_puzzle(magnets, node_budget=args.node_budget)
            summary = tracer.summary()
            formatted = format_solution(magnets, solution, budget_exhausted=summary["budget_exhausted"])
            if not args.quiet:
                print(f"== {puzzle_id}: {formatted['status']}")
                if solution is not None:
                    print(format_board(magnets))

            results.append({
                "id": puzzle_id,
                "status": formatted["status"],
                "grid_solution": formatted["rows"],
                # Assignments are the search-effort proxy; bookkeeping steps are not counted.
                "steps": summary["num_assignments"],
            })
        except Exception as e:
            print(f"ERROR: Failed to solve puzzle {puzzle_id}: {e}")
            formatted = format_solution(None, None)
            results.append({
                "id": puzzle_id,
                "status": formatted["status"],
                "grid_solution": formatted["rows"],
                "steps": -1,
            })

        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"{puzzle_id}.csv")

    if args.output:
        write_results_csv(results, args.output)
    elif args.quiet:
        print(results)
    return results


if __name__ == "__main__":
    main()
