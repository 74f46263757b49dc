"""
Session configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from chess_uci.errors import InvalidArgument


@dataclass
class SessionConfig:
    """Configuration for a UCI session.

    Collects the polling timeouts and I/O settings in one place so tests
    can shrink them and scripts can tune them without touching the session.
    """

    # Engine
    engine_path: Optional[Path] = None
    """Path to the engine executable (None = auto-detect)"""

    engine_args: Tuple[str, ...] = ()
    """Extra command line arguments passed to the engine"""

    # Polling
    poll_timeout_ms: int = 500
    """Per-iteration wait in the read loop; an empty poll ends a response"""

    startup_timeout_ms: int = 100
    """Single bounded wait used to drain the engine's startup banner"""

    # Teardown
    quit_timeout: float = 1.0
    """Seconds to wait for the engine to exit before killing it"""

    # Line handling
    line_separator: str = os.linesep
    """Separator used to split raw engine output into lines"""

    encoding: str = "utf-8"
    """Text encoding of the engine's standard streams"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.engine_path is not None:
            self.engine_path = Path(self.engine_path).expanduser()
        self.engine_args = tuple(str(arg) for arg in self.engine_args)

        if self.poll_timeout_ms <= 0:
            raise InvalidArgument(
                f"poll_timeout_ms must be positive, got {self.poll_timeout_ms}"
            )

        if self.startup_timeout_ms < 0:
            raise InvalidArgument(
                f"startup_timeout_ms must be non-negative, got {self.startup_timeout_ms}"
            )

        if self.quit_timeout < 0:
            raise InvalidArgument(f"quit_timeout must be non-negative, got {self.quit_timeout}")

        if not self.line_separator:
            raise InvalidArgument("line_separator must be a non-empty string")

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"SessionConfig(\n"
            f"  Engine: {self.engine_path or 'auto-detect'}\n"
            f"  Polling: poll={self.poll_timeout_ms}ms, startup={self.startup_timeout_ms}ms\n"
            f"  Quit timeout: {self.quit_timeout}s\n"
            f"  Line separator: {self.line_separator!r}, encoding={self.encoding}\n"
            f")"
        )
