import sys
import os
import argparse
import json

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_search.algo.generator import MAX_SIZE, MIN_SIZE
from maze_search.benchmark import compare_sizes, format_table


def run_comparison():
    parser = argparse.ArgumentParser(description="Classical vs quantum-emulated step counts, every size")
    parser.add_argument("--trials", type=int, default=10, help="Mazes per size")
    parser.add_argument("--seed", type=int, default=42, help="Random Seed")
    parser.add_argument("--carve", choices=["staircase", "backtracker"], default="staircase")
    parser.add_argument("--json", type=str, help="Also dump rows to this JSON file")
    args = parser.parse_args()

    sizes = list(range(MIN_SIZE, MAX_SIZE + 1))
    print(f"=== SCALE COMPARISON ({MIN_SIZE}..{MAX_SIZE}, {args.trials} trials, carve={args.carve}) ===")
    rows = compare_sizes(sizes, trials=args.trials, seed=args.seed, carve=args.carve)
    print(format_table(rows))

    if args.json:
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump([row.as_dict() for row in rows], f, indent=2)
        print(f"\nSaved {len(rows)} rows to {args.json}")


if __name__ == "__main__":
    run_comparison()
