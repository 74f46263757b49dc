"""
chess_uci

A client for the Universal Chess Interface (UCI) protocol. It starts an
external chess engine, talks to it over stdin/stdout, and turns typed
parameters into protocol commands and replies into typed results.

## Architecture

1. **process**: Engine process supervision
   - EngineProcess: launch, write a line, poll output with a timeout, terminate
   - find_engine: locate a default engine binary

2. **session**: The UCI protocol
   - Fish: one session per engine process (uci, isready, setoption,
     ucinewgame, position, go, stop, ponderhit, quit)
   - Command builders and reply parsers

3. **analysis**: Evaluate positions through a session

## Quick Start

```python
from chess_uci import Fish

with Fish("/usr/bin/stockfish") as fish:
    fish.uci()
    fish.set_option("Threads", 2)
    assert fish.is_ready()
    fish.position(kind="startpos", moves=["e2e4", "e7e5"])
    print(fish.go(depth=12))        # "bestmove g1f3 ponder b8c6"

    fish.go(infinite=True)          # returns immediately
    print(fish.stop())              # "bestmove ..."
```

Not supported: 'debug' and 'register'.

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_uci.config import SessionConfig
from chess_uci.errors import (
    InvalidArgument,
    LaunchError,
    SessionClosedError,
    UCIError,
    WriteError,
)
from chess_uci.process import EngineProcess, find_engine
from chess_uci.session import Collected, Deferred, Fish, GoParams, PositionKind, SessionState

__all__ = [
    "Fish",
    "SessionState",
    "SessionConfig",
    "GoParams",
    "PositionKind",
    "Collected",
    "Deferred",
    "EngineProcess",
    "find_engine",
    "UCIError",
    "LaunchError",
    "WriteError",
    "SessionClosedError",
    "InvalidArgument",
]
