#!/usr/bin/env python3
"""
Evaluate positions with a UCI engine.

Reads one FEN per line (blank lines and lines starting with '#' are
skipped), evaluates each at a fixed depth and prints or writes a CSV of
scores and best moves.

Usage:
    python tools/analyse_positions.py positions.fen [--depth 12] [--output scores.csv]
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import chess
from tqdm import tqdm

from chess_uci import Fish, LaunchError, SessionConfig
from chess_uci.analysis import EngineEvaluator


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def read_fens(path: Path) -> list:
    """Read FEN strings, rejecting any the board parser does not accept."""
    fens = []
    for number, line in enumerate(path.read_text().splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            chess.Board(line)
        except ValueError as e:
            print(f"Error: invalid FEN on line {number}: {e}")
            sys.exit(1)
        fens.append(line)
    return fens


def analyse(args):
    """Run the evaluations."""
    fen_path = Path(args.positions)
    if not fen_path.exists():
        print(f"Error: Positions file not found: {fen_path}")
        sys.exit(1)

    fens = read_fens(fen_path)
    if not fens:
        print(f"Error: No positions in {fen_path}")
        sys.exit(1)

    config = SessionConfig(engine_path=args.engine, poll_timeout_ms=args.poll_timeout)

    try:
        fish = Fish(config=config)
    except LaunchError as e:
        print(f"Error: {e}")
        sys.exit(1)

    rows = []
    with fish:
        fish.uci()
        if args.threads:
            fish.set_option("Threads", args.threads)
        fish.new_game()

        evaluator = EngineEvaluator(fish, depth=args.depth)
        for fen in tqdm(fens, desc="Evaluating positions"):
            evaluation = evaluator.evaluate_position(fen)
            rows.append({
                "fen": fen,
                "centipawns": evaluation.to_centipawns(),
                "mate_in": evaluation.mate_in if evaluation.is_mate else "",
                "depth": evaluation.depth,
                "nodes": evaluation.nodes,
                "best_move": evaluation.best_move or "",
            })

    fieldnames = ["fen", "centipawns", "mate_in", "depth", "nodes", "best_move"]
    if args.output:
        with open(args.output, "w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
        print(f"\nWrote {len(rows)} evaluations to {args.output}")
    else:
        writer = csv.DictWriter(sys.stdout, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Evaluate FEN positions with a UCI engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("positions", help="File with one FEN per line")
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        help="Path to the engine binary (default: auto-detect)",
    )
    parser.add_argument("--depth", type=int, default=12, help="Search depth per position")
    parser.add_argument("--threads", type=int, default=None, help="Engine Threads option")
    parser.add_argument(
        "--poll-timeout",
        type=int,
        default=500,
        help="Per-poll wait in ms before a reply is considered complete",
    )
    parser.add_argument("--output", type=str, default=None, help="CSV output path (default: stdout)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    setup_logging(args.verbose)
    analyse(args)


if __name__ == "__main__":
    main()
