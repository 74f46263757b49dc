"""
Locate a UCI engine binary when the caller does not supply one.
"""

import logging
import os
import shutil

from chess_uci.errors import LaunchError

logger = logging.getLogger(__name__)

ENGINE_ENV_VAR = "CHESS_UCI_ENGINE"

# Common install locations, checked in order
CANDIDATES = [
    "stockfish",
    "/usr/local/bin/stockfish",
    "/usr/bin/stockfish",
    "/usr/games/stockfish",
    "/opt/homebrew/bin/stockfish",
]


def find_engine() -> str:
    """
    Auto-detect an engine binary.

    The CHESS_UCI_ENGINE environment variable wins when set; otherwise the
    usual Stockfish locations are searched.

    Returns:
        Path to the engine binary

    Raises:
        LaunchError: If no engine is found
    """
    override = os.environ.get(ENGINE_ENV_VAR)
    if override:
        path = shutil.which(os.path.expanduser(override))
        if path is None:
            raise LaunchError(f"{ENGINE_ENV_VAR} points to a missing engine: {override}")
        logger.debug(f"Using engine from {ENGINE_ENV_VAR}: {path}")
        return path

    for candidate in CANDIDATES:
        path = shutil.which(candidate)
        if path:
            logger.debug(f"Auto-detected engine: {path}")
            return path

    raise LaunchError(
        "No UCI engine found. Install with: brew install stockfish (macOS) "
        f"or apt install stockfish (Linux), or set {ENGINE_ENV_VAR}"
    )
