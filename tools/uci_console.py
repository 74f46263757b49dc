#!/usr/bin/env python3
"""
Interactive UCI console.

Starts an engine and forwards each line typed at the prompt through a
session, printing the collected reply. 'go infinite' returns at once;
type 'stop' to collect its result. 'quit' (or end of input) ends the
session.

Usage:
    python tools/uci_console.py [--engine /usr/bin/stockfish] [--log-file uci.log]
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_uci import Collected, Fish, LaunchError, SessionClosedError, SessionConfig, WriteError


def setup_logger(log_file=None, debug=True):
    """
    Setup logger for the protocol transcript.

    Args:
        log_file: Path of the transcript file (None = log to stderr when
            debug is set, otherwise stay silent)
        debug: If True, log at DEBUG level; otherwise INFO level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("chess_uci")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )

    if log_file is not None:
        handler = logging.FileHandler(log_file, mode="w")
    elif debug:
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.NullHandler()

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def console(fish: Fish):
    """Read commands from stdin until quit or EOF."""
    for line in fish.output:
        print(line)

    while fish.running:
        try:
            command = input("uci> ").strip()
        except EOFError:
            break

        if not command:
            continue
        if command == "quit":
            break

        infinite = command.startswith("go") and "infinite" in command.split()
        try:
            result = fish.run(command, wait_for_output=not infinite)
        except (WriteError, SessionClosedError) as e:
            print(f"# Engine closed: {e}", file=sys.stderr)
            break

        if isinstance(result, Collected):
            for reply in result:
                print(reply)
        else:
            print("# searching; type 'stop' to collect the result")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Interactive console for a UCI engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        help="Path to the engine binary (default: auto-detect)",
    )
    parser.add_argument(
        "--poll-timeout",
        type=int,
        default=500,
        help="Per-poll wait in ms before a reply is considered complete",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Write the protocol transcript here")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")

    args = parser.parse_args()
    setup_logger(args.log_file, debug=args.verbose or args.log_file is not None)

    config = SessionConfig(engine_path=args.engine, poll_timeout_ms=args.poll_timeout)
    try:
        fish = Fish(config=config)
    except LaunchError as e:
        print(f"Error: {e}")
        sys.exit(1)

    with fish:
        console(fish)


if __name__ == "__main__":
    main()
