"""
UCI session: command/response exchange with a running engine.

Fish is the session itself. The command builders, reply parsers and run
results it uses are exported as well, for callers that drive run()
directly.
"""

from chess_uci.session.commands import (
    GO_FIELDS,
    GoParams,
    PositionKind,
    build_go,
    build_position,
    build_setoption,
    parse_go,
)
from chess_uci.session.fish import Fish, SessionState
from chess_uci.session.parsing import (
    clamp_score,
    BestMove,
    EngineInfo,
    OptionSpec,
    SearchInfo,
    parse_bestmove,
    parse_info,
    parse_option,
    parse_uci_response,
)
from chess_uci.session.results import Collected, Deferred, RunResult, split_lines

__all__ = [
    "Fish",
    "SessionState",
    "GO_FIELDS",
    "GoParams",
    "PositionKind",
    "build_go",
    "build_position",
    "build_setoption",
    "parse_go",
    "BestMove",
    "EngineInfo",
    "OptionSpec",
    "SearchInfo",
    "clamp_score",
    "parse_bestmove",
    "parse_info",
    "parse_option",
    "parse_uci_response",
    "Collected",
    "Deferred",
    "RunResult",
    "split_lines",
]
